# regscript
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
import sys
from typing import List

from .base import SubcommandBase
from ..core import exceptions
from ..utility.cmdline import convert_parameter

LOG = logging.getLogger(__name__)

class RunSubcommand(SubcommandBase):
    """@brief `regscript run` subcommand.

    Prints the commands of a script, one per line, so they can be piped into gdb or pasted into a
    debugger console.
    """

    NAMES = ['run']
    HELP = "Print the commands produced by a script."
    EPILOG = ("Parameters are given in order, the first one being $0. Use 'none' for a value that "
            "is not available, such as a symbol missing from the target image.")

    @classmethod
    def get_args(cls) -> List[argparse.ArgumentParser]:
        """@brief Add this subcommand to the subparsers object."""
        run_parser = argparse.ArgumentParser(description=cls.HELP, add_help=False)

        run_options = run_parser.add_argument_group('run options')
        run_options.add_argument('-p', '--param', dest='params', action='append', default=[],
            type=convert_parameter, metavar="VALUE",
            help="Runtime parameter value. Can be specified multiple times.")
        run_parser.add_argument('name', metavar="SCRIPT",
            help="Name of the script.")

        return [cls.CommonOptions.COMMON, cls.CommonOptions.MCU, run_parser]

    def invoke(self) -> int:
        """@brief Handle 'run' subcommand."""
        with self._load_session() as session:
            if self._args.name not in session.database.registry:
                raise exceptions.UnknownScriptError(
                        f"no script '{self._args.name}' for {session.mcu}")

            for command in session.run(self._args.name, self._args.params):
                sys.stdout.write(command)

        return 0
