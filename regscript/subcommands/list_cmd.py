# regscript
# Copyright (c) 2021 Chris Reed
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
from ..script.definitions import (SIZE_TYPE_NAMES, Tier)

LOG = logging.getLogger(__name__)

class ListSubcommand(SubcommandBase):
    """@brief `regscript list` subcommand."""

    NAMES = ['list']
    HELP = "List the scripts or registers available for an MCU."

    ## @brief Names used for each tier in the source column.
    TIER_NAMES = {
        Tier.BUILTIN: "builtin",
        Tier.OVERLAY: "overlay",
        }

    @classmethod
    def get_args(cls) -> List[argparse.ArgumentParser]:
        """@brief Add this subcommand to the subparsers object."""
        list_parser = argparse.ArgumentParser(description=cls.HELP, add_help=False)

        list_output = list_parser.add_argument_group("list output")
        list_output.add_argument('-s', '--scripts', action='store_true',
            help="List scripts. This is the default.")
        list_output.add_argument('-r', '--registers', action='store_true',
            help="List registers.")

        list_options = list_parser.add_argument_group('list options')
        list_options.add_argument('-H', '--no-header', action='store_true',
            help="Don't print a table header.")

        return [cls.CommonOptions.COMMON, cls.CommonOptions.MCU, list_parser]

    def invoke(self) -> int:
        """@brief Handle 'list' subcommand."""
        if self._args.scripts and self._args.registers:
            LOG.error("Only one of the output options '--scripts' or '--registers' may be selected at a time.")
            return 1

        with self._load_session() as session:
            if self._args.registers:
                pt = self._get_pretty_table(["Name", "Address", "Size"])
                for reg in session.registers:
                    pt.add_row([reg.name, f"{reg.address:#010x}", SIZE_TYPE_NAMES[reg.size]])
            else:
                pt = self._get_pretty_table(["Name", "Source", "Instructions"])
                for script in session.scripts:
                    pt.add_row([script.name, self.TIER_NAMES[script.tier], len(script)])
            print(pt)

        return 0
