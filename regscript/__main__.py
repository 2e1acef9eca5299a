# regscript
# Copyright (c) 2018-2021 Arm Limited
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

import os
import sys
import logging
import argparse
import colorama
import fnmatch
from typing import (Any, Optional, Sequence)

from . import __version__
from .core import exceptions
from .core import options
from .utility.color_log import build_color_logger
from .subcommands.base import SubcommandBase
from .subcommands.list_cmd import ListSubcommand
from .subcommands.run_cmd import RunSubcommand
from .subcommands.show_cmd import ShowSubcommand

## @brief Logger for this module.
LOG = logging.getLogger("regscript.tool")

class RegScriptTool(SubcommandBase):
    """@brief Command line front end: list, show and run register scripts for an MCU."""

    HELP = "Register scripts for MCU debug setup, rendered as gdb commands"

    SUBCOMMANDS = [
        ListSubcommand,
        RunSubcommand,
        ShowSubcommand,
        ]

    LOG_LEVEL_NAMES = {
            'debug': logging.DEBUG,
            'info': logging.INFO,
            'warning': logging.WARNING,
            'error': logging.ERROR,
            'critical': logging.CRITICAL,
            }

    def __init__(self):
        super().__init__(argparse.Namespace())
        self._parser = self.build_parser()
        self._command: Optional[SubcommandBase] = None

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(description=self.HELP)
        parser.set_defaults(command_class=self, quiet=0, verbose=0, log_level=[])

        parser.add_argument('-V', '--version', action='version', version=__version__)
        parser.add_argument('--help-options', action='store_true',
            help="Display available session options.")

        self.add_subcommands(parser)

        return parser

    def _setup_logging(self) -> None:
        """@brief Configure logging from the -v, -q, -L and --color arguments.

        `REGSCRIPT_COLOR` is used when --color is not given.
        """
        color_setting = ((hasattr(self._args, 'color') and self._args.color) \
                        or os.environ.get('REGSCRIPT_COLOR', 'auto'))
        level = max(1, self._args.command_class.DEFAULT_LOG_LEVEL + self._get_log_level_delta())
        build_color_logger(level=level, color_setting=color_setting)

        for logger_setting in self._args.log_level:
            try:
                loggers, level_name = logger_setting.split('=')[:2]
                level = self.LOG_LEVEL_NAMES[level_name.strip().lower()]
                for logger_pattern in loggers.split(','):
                    matching_loggers = fnmatch.filter(logging.root.manager.loggerDict.keys(), logger_pattern.strip()) # type:ignore
                    LOG.debug('setting log level %s for %s', level_name, matching_loggers)
                    for logger in matching_loggers:
                        log = logging.getLogger(logger)
                        log.setLevel(level)
                        log.disabled = False
            except (ValueError, KeyError):
                raise exceptions.CommandError(f"invalid --log-level argument '{logger_setting}'")

    def invoke(self) -> int:
        """@brief Show help when no subcommand is given."""
        if self._args.help_options:
            self.show_options_help()
        else:
            self._parser.print_help()
        return 0

    def __call__(self, *args: Any, **kwds: Any) -> "RegScriptTool":
        # The tool is its own default command class.
        return self

    def run(self, args: Optional[Sequence[str]] = None) -> int:
        """@brief Parse arguments and invoke the selected subcommand.
        @return Process exit status. Errors are logged and reported as 1.
        """
        self._command = None
        try:
            self._args = self._parser.parse_args(args)
            self._setup_logging()

            self._command = self._args.command_class(self._args)
            return self._command.invoke()
        except KeyboardInterrupt:
            return 0
        except (exceptions.Error, ValueError, IndexError) as e:
            LOG.critical(e, exc_info=self._log_tracebacks)
            return 1
        except Exception as e:
            LOG.critical("Error: %s", e, exc_info=self._log_tracebacks)
            return 1

    @property
    def _log_tracebacks(self) -> bool:
        """@brief Whether errors are logged with a traceback.

        Uses the session's 'debug.traceback' option once the subcommand has created a session.
        Before that, tracebacks are shown only with debug logging.
        """
        session = self._command.session if self._command is not None else None
        if session is not None:
            return session.log_tracebacks
        return logging.getLogger('regscript').isEnabledFor(logging.DEBUG)

    def show_options_help(self) -> None:
        """@brief Print the name, type and help of every session option."""
        for info_name in sorted(options.OPTIONS_INFO.keys()):
            info = options.OPTIONS_INFO[info_name]
            if isinstance(info.type, tuple):
                typename = ", ".join(t.__name__ for t in info.type)
            else:
                typename = info.type.__name__
            print((colorama.Fore.CYAN + colorama.Style.BRIGHT + "{name}" + colorama.Style.RESET_ALL  # type:ignore
                + colorama.Fore.GREEN + " ({typename})" + colorama.Style.RESET_ALL
                + " {help}").format(
                name=info.name, typename=typename, help=info.help))

def main():
    sys.exit(RegScriptTool().run())

if __name__ == '__main__':
    main()
