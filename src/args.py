"""Argument parsing functionality for nugbot."""

import argparse
from constants import Constants


def build_parser():
    """Build the argument parser for the nugbot CLI."""
    parser = argparse.ArgumentParser(
        prog="nugbot",
        description=(
            "nugbot - check NuGet package references for newer versions"
        ),
        add_help=True,
    )

    parser.add_argument("MANIFEST",
                        help="Manifest to check (.csproj, .fsproj, .vbproj, Directory.Build.props, "
                             "Directory.Packages.props, packages.config or project.json)",
                        action="store", type=str)

    parser.add_argument("-u", "--update-type",
                        dest="UPDATE_TYPE",
                        help="Update type: major, minor, patch (default: patch)",
                        action="store",
                        type=str.lower,
                        choices=Constants.UPDATE_TYPES)

    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Path to output file (JSON or CSV); defaults to stdout",
                        action="store",
                        type=str)
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (json or csv). If not specified, inferred from --output extension; "
                             "defaults to json.",
                        action="store",
                        type=str.lower,
                        choices=Constants.OUTPUT_FORMATS)

    parser.add_argument("--registry-url",
                        dest="REGISTRY_URL",
                        help="NuGet V3 registration base URL",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("--log-json",
                        dest="LOG_JSON",
                        help="Emit log records as JSON lines on stderr.",
                        action="store_true",
                        default=None)

    parser.add_argument("--error-on-updates",
                        dest="ERROR_ON_UPDATES",
                        help="Exit with a non-zero status code if updates are available.",
                        action="store_true")

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
