# regscript
# Copyright (c) 2021-2023 Chris Reed
# Copyright (c) 2026 The regscript Authors
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import argparse
import logging
import prettytable
from typing import (Any, Dict, List, Optional, Type)

from ..core.session import ScriptSession
from ..utility.cmdline import convert_session_options

class SubcommandBase:
    """@brief Base class for regscript command line subcommand."""

    # Subcommand descriptors.
    NAMES: List[str] = []
    HELP: str = ""
    EPILOG: Optional[str] = None
    DEFAULT_LOG_LEVEL = logging.WARNING
    SUBCOMMANDS: List[Type["SubcommandBase"]] = []

    ## Class attribute to store the built subcommand argument parser.
    parser: Optional[argparse.ArgumentParser] = None

    class CommonOptions:
        """@brief Namespace with parsers for repeated option groups."""

        # Define logging related options.
        LOGGING = argparse.ArgumentParser(description='logging', add_help=False)
        LOGGING_GROUP = LOGGING.add_argument_group("logging")
        LOGGING_GROUP.add_argument('-v', '--verbose', action='count', default=0,
            help="Increase logging level. Can be specified multiple times.")
        LOGGING_GROUP.add_argument('-q', '--quiet', action='count', default=0,
            help="Decrease logging level. Can be specified multiple times.")
        LOGGING_GROUP.add_argument('-L', '--log-level', action='append', metavar="LOGGERS=LEVEL", default=[],
            help="Set log level of loggers whose name matches any of the comma-separated list of glob-style "
            "patterns. Log level must be one of (critical, error, warning, info, debug). Can be "
            "specified multiple times. Example: -L*.trace,regscript.script.*=debug")
        LOGGING_GROUP.add_argument('--color', choices=("always", "auto", "never"), default=None, nargs='?',
            const="auto", help="Control color logging. Default is auto.")

        # Define config related options for all subcommands.
        CONFIG = argparse.ArgumentParser(description='common', add_help=False)
        CONFIG_GROUP = CONFIG.add_argument_group("configuration")
        CONFIG_GROUP.add_argument('-j', '--project', '--dir', metavar="PATH", dest="project_dir",
            help="Set the project directory. Defaults to the directory where regscript was run.")
        CONFIG_GROUP.add_argument('--config', metavar="PATH",
            help="Specify YAML configuration file. Defaults to regscript.yaml or regscript.yml in the "
            "project directory.")
        CONFIG_GROUP.add_argument("--no-config", action="store_true", default=None,
            help="Do not use a configuration file.")
        CONFIG_GROUP.add_argument('--overlay', metavar="PATH",
            help="Use the specified overlay definitions file. Defaults to regscript.def in the project "
            "directory.")
        CONFIG_GROUP.add_argument("--no-overlay", action="store_true", default=None,
            help="Only use the built-in registers and scripts.")
        CONFIG_GROUP.add_argument('-O', action='append', dest='options', metavar="OPTION=VALUE",
            help="Set named option.")

        # Define common options for all subcommands, including logging options.
        COMMON = argparse.ArgumentParser(description='common',
            parents=[LOGGING, CONFIG], add_help=False)

        # Options selecting the MCU whose definitions are loaded.
        MCU = argparse.ArgumentParser(description='mcu', add_help=False)
        MCU_GROUP = MCU.add_argument_group("mcu")
        MCU_GROUP.add_argument("-m", "--mcu", required=True,
            help="MCU family name, for example 'STM32F407' or 'LPC1343 M3'.")
        MCU_GROUP.add_argument("-a", "--arch", default=None,
            help="Core architecture, for example 'M0' or 'M4'. Selects scripts declared for '[ARCH]'.")

    @classmethod
    def add_subcommands(cls, parser: argparse.ArgumentParser) -> None:
        """@brief Add declared subcommands to the given parser."""
        if cls.SUBCOMMANDS:
            subparsers = parser.add_subparsers(title="subcommands", metavar="", dest='cmd')
            for subcmd_class in cls.SUBCOMMANDS:
                parsers = subcmd_class.get_args()
                subcmd_class.parser = parsers[-1]

                subparser = subparsers.add_parser(
                                subcmd_class.NAMES[0],
                                aliases=subcmd_class.NAMES[1:],
                                parents=parsers,
                                help=subcmd_class.HELP,
                                epilog=subcmd_class.EPILOG)
                subparser.set_defaults(command_class=subcmd_class)

    @classmethod
    def get_args(cls) -> List[argparse.ArgumentParser]:
        """@brief Add this subcommand to the subparsers object.
        @return List of argument parsers. The last element in the list _must_ be the parser for the subcommand
            class itself, as it is saved by the caller in cls.parser.
        """
        raise NotImplementedError()

    def __init__(self, args: argparse.Namespace):
        """@brief Constructor.

        @param self This object.
        @param args Namespace of parsed argument values.
        """
        self._args = args
        self._session: Optional[ScriptSession] = None

    def invoke(self) -> int:
        """@brief Run the subcommand.
        @return Process status code for the command.
        """
        if self.parser is not None:
            self.parser.print_help()
        return 0

    @property
    def session(self) -> Optional[ScriptSession]:
        """@brief The session created by this subcommand, or None if it has not created one."""
        return self._session

    def _get_log_level_delta(self) -> int:
        """@brief Compute the logging level delta sum from quiet and verbose counts."""
        return (self._args.quiet * 10) - (self._args.verbose * 10)

    def _get_pretty_table(self, fields: List[str], header: Optional[bool] = None) -> prettytable.PrettyTable:
        """@brief Returns a PrettyTable object with formatting options set."""
        pt = prettytable.PrettyTable(fields)
        pt.align = 'l'
        if header is not None:
            pt.header = header
        elif hasattr(self._args, 'no_header'):
            pt.header = not self._args.no_header
        else:
            pt.header = True
        pt.border = True
        pt.hrules = prettytable.HEADER
        pt.vrules = prettytable.NONE
        return pt

    def _modified_option_defaults(self) -> Dict[str, Any]:
        """@brief Returns a dict of session option defaults.

        @precondition Logging must have been configured.
        """
        return {
            # Change 'debug.traceback' default to True if debug logging is enabled.
            'debug.traceback': logging.getLogger('regscript').isEnabledFor(logging.DEBUG),
        }

    def _create_session(self) -> ScriptSession:
        """@brief Create a session from the common configuration arguments."""
        self._session = ScriptSession(
                options=convert_session_options(self._args.options),
                option_defaults=self._modified_option_defaults(),
                project_dir=self._args.project_dir,
                config_file=self._args.config,
                no_config=self._args.no_config,
                overlay_file=self._args.overlay,
                no_overlay=self._args.no_overlay)
        return self._session

    def _load_session(self) -> ScriptSession:
        """@brief Create a session and load definitions for the MCU given on the command line."""
        session = self._create_session()
        session.load(self._args.mcu, self._args.arch)
        return session
