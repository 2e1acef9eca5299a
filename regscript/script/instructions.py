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

from dataclasses import (dataclass, field)
from enum import Enum
from typing import (Iterator, Tuple, Union)

from .definitions import Tier

@dataclass(frozen=True)
class Literal:
    """@brief Integer operand known at compile time."""
    value: int

    def __str__(self) -> str:
        return f"{self.value:#x}"

@dataclass(frozen=True)
class RegisterRef:
    """@brief Destination resolved from a register name when the script was compiled."""
    name: str
    address: int

    def __str__(self) -> str:
        return self.name

@dataclass(frozen=True)
class Parameter:
    """@brief Placeholder for a runtime value supplied when the instruction is formatted."""
    index: int

    def __str__(self) -> str:
        return f"${self.index}"

Operand = Union[Literal, RegisterRef, Parameter]

class Operator(Enum):
    """@brief Read-modify-write operations.

    The enum value is the operator text used in the rendered "set" command.
    """
    ASSIGN = "="
    SET_BITS = "|="
    CLEAR_BITS = "&="
    ## Clear bits using the complement of a runtime parameter. The complement can't be computed
    # at compile time, so the inversion is written into the rendered command instead.
    CLEAR_BITS_INVERTED = "&= ~"

    def apply_to(self, value_text: str) -> str:
        """@brief Operator text followed by the operand text, e.g. "|= 0x4" or "&= ~0xf"."""
        if self is Operator.CLEAR_BITS_INVERTED:
            return f"{self.value}{value_text}"
        return f"{self.value} {value_text}"

@dataclass(frozen=True)
class CompiledInstruction:
    """@brief One primitive register operation."""
    destination: Operand
    operator: Operator
    value: Operand
    size: int = 4

    def __str__(self) -> str:
        return f"{self.destination} {self.operator.apply_to(str(self.value))} ({self.size} bytes)"

@dataclass(frozen=True)
class CompiledScript:
    """@brief Named, ordered sequence of compiled instructions.

    The tier and declaration order are used by the ScriptRegistry to choose between scripts that
    share a name.
    """
    name: str
    instructions: Tuple[CompiledInstruction, ...] = field(default_factory=tuple)
    tier: Tier = Tier.BUILTIN
    order: int = 0

    @property
    def precedence(self) -> Tuple[int, int]:
        return (self.tier.value, self.order)

    def __len__(self) -> int:
        return len(self.instructions)

    def __iter__(self) -> Iterator[CompiledInstruction]:
        return iter(self.instructions)

    def __getitem__(self, index: int) -> CompiledInstruction:
        return self.instructions[index]
