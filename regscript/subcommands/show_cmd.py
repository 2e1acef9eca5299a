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
from typing import List

from .base import SubcommandBase
from ..core import exceptions
from ..script.definitions import SIZE_TYPE_NAMES

LOG = logging.getLogger(__name__)

class ShowSubcommand(SubcommandBase):
    """@brief `regscript show` subcommand."""

    NAMES = ['show']
    HELP = "Show the compiled instructions of a script."

    @classmethod
    def get_args(cls) -> List[argparse.ArgumentParser]:
        """@brief Add this subcommand to the subparsers object."""
        show_parser = argparse.ArgumentParser(description=cls.HELP, add_help=False)

        show_options = show_parser.add_argument_group('show options')
        show_options.add_argument('-H', '--no-header', action='store_true',
            help="Don't print a table header.")
        show_parser.add_argument('name', metavar="SCRIPT",
            help="Name of the script.")

        return [cls.CommonOptions.COMMON, cls.CommonOptions.MCU, show_parser]

    def invoke(self) -> int:
        """@brief Handle 'show' subcommand."""
        with self._load_session() as session:
            script = session.database.registry.get(self._args.name)
            if script is None:
                raise exceptions.UnknownScriptError(
                        f"no script '{self._args.name}' for {session.mcu}")

            pt = self._get_pretty_table(["#", "Destination", "Operation", "Size"])
            for index, instruction in enumerate(script):
                pt.add_row([
                    index,
                    str(instruction.destination),
                    instruction.operator.apply_to(str(instruction.value)),
                    SIZE_TYPE_NAMES[instruction.size],
                    ])
            print(pt)

        return 0
