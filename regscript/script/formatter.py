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

from __future__ import annotations

import logging
from typing import (Optional, Sequence)

from ..core import exceptions
from ..utility.mask import (mask32, size_mask)
from .definitions import SIZE_TYPE_NAMES
from .instructions import (CompiledInstruction, Literal, Operand, Parameter, RegisterRef)

LOG = logging.getLogger(__name__)

## Runtime parameter value meaning "not available", e.g. a symbol that isn't in the target image.
PARAM_ABSENT = 0xffffffff

## Type of the runtime parameter vector. A None entry is treated the same as PARAM_ABSENT.
Params = Sequence[Optional[int]]

def _resolve(operand: Operand, params: Optional[Params]) -> Optional[int]:
    if isinstance(operand, Literal):
        return operand.value
    elif isinstance(operand, RegisterRef):
        return operand.address
    assert isinstance(operand, Parameter)
    if params is None or operand.index >= len(params):
        raise exceptions.UnresolvedParameterError(f"parameter ${operand.index} was not supplied")
    return params[operand.index]

def format_instruction(instruction: CompiledInstruction, params: Optional[Params] = None) -> str:
    """@brief Render an instruction as a gdb "set" command.

    Parameter placeholders are replaced by entries of `params`. The value is masked to the
    instruction's size. For example, a 1-byte clear of parameter-inverted bits renders as
    `set {char}0x1000 &= ~0xf` followed by a newline.

    @param instruction The instruction to render.
    @param params Runtime parameter values indexed by placeholder number.
    @return The command string, terminated with a newline.
    @exception UnresolvedParameterError The destination is a parameter that is absent, or a
        referenced parameter is missing from `params`. The caller should skip this instruction.
    """
    address = _resolve(instruction.destination, params)
    # The absent sentinel only applies to addresses supplied at runtime.
    if isinstance(instruction.destination, Parameter) \
            and (address is None or mask32(address) == PARAM_ABSENT):
        raise exceptions.UnresolvedParameterError(
                f"address {instruction.destination} is not available")
    assert address is not None

    value = _resolve(instruction.value, params)
    if value is None:
        raise exceptions.UnresolvedParameterError(f"value {instruction.value} is not available")

    type_name = SIZE_TYPE_NAMES[instruction.size]
    value &= size_mask(instruction.size)
    return f"set {{{type_name}}}{mask32(address):#x} {instruction.operator.apply_to(f'{value:#x}')}\n"
