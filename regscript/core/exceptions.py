# regscript
# Copyright (c) 2018-2020 Arm Limited
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

class Error(RuntimeError):
    """@brief Parent of all errors regscript can raise"""
    pass

class InternalError(Error):
    """@brief Internal consistency or logic error.

    This error indicates that something has happened that shouldn't be possible, such as a
    built-in script referring to a register that the built-in register table does not define
    for the same MCU.
    """
    pass

class CommandError(Error):
    """@brief Raised when a command line argument or command is invalid."""
    pass

class PatternError(Error):
    """@brief An MCU applicability list is malformed."""
    pass

class ScriptError(Error):
    """@brief Parent of errors related to register scripts."""
    pass

class ScriptSyntaxError(ScriptError):
    """@brief A script line could not be parsed."""
    pass

class ScriptSemanticError(ScriptError):
    """@brief A script line parsed but describes an unsupported operation."""
    pass

class UnresolvedRegisterError(ScriptError):
    """@brief A script line refers to a register that is not defined for the loaded MCU.

    The name of the missing register is available from the `register_name` attribute.
    """
    def __init__(self, *args, **kwargs):
        super().__init__(*args)
        self._register_name = kwargs.get('register_name', None)

    @property
    def register_name(self):
        return self._register_name

class OverlayError(ScriptError):
    """@brief A line of the user overlay file does not match any record shape.

    The optional `path` and `line` keyword arguments record where the problem was found and are
    included when the exception is converted to a string.
    """
    def __init__(self, *args, **kwargs):
        super().__init__(*args)
        self._path = kwargs.get('path', None)
        self._line = kwargs.get('line', None)

    @property
    def path(self):
        return self._path

    @property
    def line(self):
        return self._line

    def __str__(self):
        desc = super().__str__()
        if self._line is not None:
            location = "line %d" % self._line
            if self._path is not None:
                location = "%s:%d" % (self._path, self._line)
            desc = "%s: %s" % (location, desc)
        return desc

class UnknownScriptError(ScriptError):
    """@brief No compiled script exists with the requested name."""
    pass

class ScriptExhaustedError(ScriptError):
    """@brief All instructions of the active script have been returned."""
    pass

class UnresolvedParameterError(ScriptError):
    """@brief A runtime parameter needed to render an instruction is absent.

    Only the instruction being formatted is affected; the caller should skip it and continue with
    the rest of the script.
    """
    pass
