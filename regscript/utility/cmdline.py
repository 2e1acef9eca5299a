# regscript
# Copyright (c) 2015-2020 Arm Limited
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
from typing import (Any, Dict, Iterable, Optional)

from ..core.options import OPTIONS_INFO
from ..script.formatter import PARAM_ABSENT
from ..script.parser import parse_int_literal

LOG = logging.getLogger(__name__)

## Words accepted in place of a number for a runtime parameter that is not available.
ABSENT_PARAM_NAMES = ('none', 'absent', '-')

def convert_session_options(option_list: Optional[Iterable[str]]) -> Dict[str, Any]:
    """@brief Convert a list of session option settings to a dictionary."""
    options = {}
    if option_list is not None:
        for o in option_list:
            if '=' in o:
                name, value = o.split('=', 1)
                name = name.strip().lower()
                value = value.strip()
            else:
                name = o.strip().lower()
                value = None

            # Check for and strip "no-" prefix before we validate the option name.
            if (value is None) and (name.startswith('no-')):
                name = name[3:]
                had_no_prefix = True
            else:
                had_no_prefix = False

            # Look for this option.
            try:
                info = OPTIONS_INFO[name]
            except KeyError:
                LOG.warning("ignoring unknown session option '%s'", name)
                continue

            # Handle bool options without a value specially.
            if value is None:
                if info.type is bool:
                    value = not had_no_prefix
                else:
                    LOG.warning("non-boolean option '%s' requires a value", name)
                    continue
            # Convert string value to option type.
            elif info.type is bool:
                if value.lower() in ("true", "1", "yes", "on", "false", "0", "no", "off"):
                    value = value.lower() in ("true", "1", "yes", "on")
                else:
                    LOG.warning("invalid value for option '%s'", name)
                    continue
            elif info.type is int:
                try:
                    value = int(value, base=0)
                except ValueError:
                    LOG.warning("invalid value for option '%s'", name)
                    continue

            options[name] = value
    return options

def convert_parameter(value: str) -> int:
    """@brief Convert a runtime script parameter from the command line.

    Accepts a C-style integer (decimal, 0x hex or leading-zero octal). One of the words in
    ABSENT_PARAM_NAMES selects the "not available" value.

    @exception argparse.ArgumentTypeError The value is not valid. Raised so argparse can report it.
    """
    if value.strip().lower() in ABSENT_PARAM_NAMES:
        return PARAM_ABSENT
    try:
        result = parse_int_literal(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid parameter value '{value}'")
    if not (0 <= result <= PARAM_ABSENT):
        raise argparse.ArgumentTypeError(f"parameter value '{value}' is out of 32-bit range")
    return result
