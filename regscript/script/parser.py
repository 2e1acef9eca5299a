# regscript
# Copyright (c) 2020 Arm Limited
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

import lark.lark
import lark.exceptions
import lark.visitors
import logging
from lark.lexer import Token as LarkToken
from lark.tree import Tree as LarkTree
from typing import (Any, List, Mapping, Optional, Tuple)

from ..core import exceptions
from ..utility.mask import bit_invert
from .definitions import (RegisterDefinition, ScriptDefinition)
from .instructions import (
    CompiledInstruction,
    CompiledScript,
    Literal,
    Operand,
    Operator,
    Parameter,
    RegisterRef,
    )

LOG = logging.getLogger(__name__)
TRACE = LOG.getChild("trace")
TRACE.setLevel(logging.CRITICAL)

## Largest value of an address or value literal.
MAX_LITERAL = 0xffffffff

## Map from operator terminal to the operator it compiles to.
_OPERATORS = {
    'ASSIGN': Operator.ASSIGN,
    'SET_BITS': Operator.SET_BITS,
    'CLEAR_BITS': Operator.CLEAR_BITS,
    'CLEAR_INVERTED': Operator.CLEAR_BITS,
    }

def parse_int_literal(text: str) -> int:
    """@brief Convert an integer literal using C conventions.

    A "0x" prefix selects hexadecimal, a leading zero selects octal, and anything else is decimal.

    @exception ValueError The text is not a valid literal.
    """
    text = text.strip()
    if text[:2] in ('0x', '0X'):
        return int(text[2:], 16)
    elif len(text) > 1 and text.startswith('0'):
        return int(text[1:], 8)
    else:
        return int(text, 10)

class Parser:
    """@brief Register script instruction parser."""

    ## Shared parser object.
    _parser = lark.lark.Lark.open("script.lark",
                        rel_to=__file__,
                        parser="lalr",
                        maybe_placeholders=True,
                        propagate_positions=True)

    @classmethod
    def parse(cls, data: str) -> LarkTree:
        try:
            return cls._parser.parse(data)
        except lark.exceptions.UnexpectedInput as e:
            message = str(e) + "\n\nContext: " + e.get_context(data, 40)
            raise exceptions.ScriptSyntaxError(message) from e

class _InstructionBuilder(lark.visitors.Transformer):
    """@brief Transformer that turns the parse tree of one line into a CompiledInstruction.

    Register names are resolved against the provided register table. Parameters are left as
    placeholders for the formatter.
    """

    def __init__(self, registers: Mapping[str, RegisterDefinition], location: str) -> None:
        super().__init__()
        self._registers = registers
        self._location = location

    def _literal(self, tok: LarkToken) -> int:
        try:
            value = parse_int_literal(tok.value)
        except ValueError:
            raise exceptions.ScriptSyntaxError(f"{self._location}: invalid integer literal '{tok.value}'")
        if value > MAX_LITERAL:
            raise exceptions.ScriptSyntaxError(f"{self._location}: literal '{tok.value}' exceeds 32 bits")
        return value

    def start(self, children: List[Any]) -> Optional[CompiledInstruction]:
        return children[0] if children else None

    def address_destination(self, children: List[Any]) -> Tuple[Operand, int]:
        return Literal(self._literal(children[0])), 4

    def parameter_destination(self, children: List[Any]) -> Tuple[Operand, int]:
        return Parameter(int(children[0].value[1:])), 4

    def register_destination(self, children: List[Any]) -> Tuple[Operand, int]:
        name = children[0].value
        try:
            reg = self._registers[name]
        except KeyError:
            raise exceptions.UnresolvedRegisterError(
                    f"{self._location}: undefined register '{name}'", register_name=name)
        return RegisterRef(reg.name, reg.address), reg.size

    def operator(self, children: List[Any]) -> str:
        return children[0].type

    def operand(self, children: List[Any]) -> Tuple[bool, Any]:
        invert_tok, value_tok = children
        return (invert_tok is not None), value_tok

    def instruction(self, children: List[Any]) -> CompiledInstruction:
        _, (destination, size), op_type, (invert, value_tok) = children

        # "a ~= b" means "a &= ~b". A further "~" on the operand cancels the inversion.
        operator = _OPERATORS[op_type]
        if op_type == 'CLEAR_INVERTED':
            invert = not invert

        value: Operand
        if value_tok.type == 'PARAM':
            value = Parameter(int(value_tok.value[1:]))
            if invert:
                # The complement of a parameter is only known at format time.
                if operator is not Operator.CLEAR_BITS:
                    raise exceptions.ScriptSemanticError(
                            f"{self._location}: an inverted parameter can only be used to clear bits")
                operator = Operator.CLEAR_BITS_INVERTED
        else:
            literal = self._literal(value_tok)
            value = Literal(bit_invert(literal) if invert else literal)

        return CompiledInstruction(destination, operator, value, size)

def compile_line(
            line: str,
            registers: Mapping[str, RegisterDefinition],
            location: str = "<line>"
        ) -> Optional[CompiledInstruction]:
    """@brief Compile one script line.

    @param line Text of the line. Comments introduced by "#" are allowed.
    @param registers Map from register name to definition, used to resolve register destinations.
    @param location Description of where the line came from, used in error messages.
    @return A CompiledInstruction, or None if the line is blank or only a comment.

    @exception ScriptSyntaxError The line can't be parsed.
    @exception ScriptSemanticError The line combines an inverted parameter with "=" or "|=".
    @exception UnresolvedRegisterError The line refers to an undefined register.
    """
    try:
        tree = Parser.parse(line.strip())
    except exceptions.ScriptSyntaxError as err:
        raise exceptions.ScriptSyntaxError(f"{location}: {err}") from err
    try:
        instruction = _InstructionBuilder(registers, location).transform(tree)
    except lark.exceptions.VisitError as err:
        # Unwrap errors raised from within the transformer callbacks.
        if isinstance(err.orig_exc, exceptions.Error):
            raise err.orig_exc from None
        raise
    if instruction is not None:
        TRACE.debug("%s: %s", location, instruction)
    return instruction

def compile_script(
            definition: ScriptDefinition,
            registers: Mapping[str, RegisterDefinition],
            order: int = 0
        ) -> CompiledScript:
    """@brief Compile every line of a script definition.

    Line order is preserved. Errors from any line abort compilation of the whole script.
    """
    instructions = []
    for offset, line in enumerate(definition.lines):
        location = f"script '{definition.name}' line {definition.first_line + offset}"
        instruction = compile_line(line, registers, location)
        if instruction is not None:
            instructions.append(instruction)
    return CompiledScript(definition.name, tuple(instructions), definition.tier, order)
