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
from collections import OrderedDict
from typing import (Dict, Iterator, List, Optional)

from ..core import exceptions
from .instructions import (CompiledInstruction, CompiledScript)

LOG = logging.getLogger(__name__)
TRACE = LOG.getChild("trace")
TRACE.setLevel(logging.CRITICAL)

class ScriptRegistry:
    """@brief Compiled scripts for the loaded MCU, keyed by name.

    Several scripts may share a name, for example a generic script for all MCUs plus a script for
    a specific architecture, or a built-in script plus an overlay script. All of them are kept, and
    lookup selects one by an explicit precedence rule:

    1. Scripts from the overlay file take precedence over built-in scripts.
    2. Within the same tier, the script declared last takes precedence.

    Name lookup is case-insensitive.
    """

    def __init__(self) -> None:
        self._scripts: Dict[str, List[CompiledScript]] = OrderedDict()
        self._count = 0

    def add(self, script: CompiledScript) -> None:
        """@brief Add a compiled script as a candidate for its name."""
        self._scripts.setdefault(script.name.lower(), []).append(script)
        self._count += 1
        LOG.debug("added %s script '%s' (%d instructions)", script.tier.name.lower(), script.name, len(script))

    def clear(self) -> None:
        self._scripts.clear()
        self._count = 0

    def get(self, name: str) -> Optional[CompiledScript]:
        """@brief Return the script with the highest precedence for a name, or None."""
        candidates = self._scripts.get(name.lower())
        if not candidates:
            return None
        return max(candidates, key=lambda s: s.precedence)

    def candidates(self, name: str) -> List[CompiledScript]:
        """@brief Return all scripts with a name, highest precedence first."""
        return sorted(self._scripts.get(name.lower(), []), key=lambda s: s.precedence, reverse=True)

    def iterate(self, name: str) -> ScriptIterator:
        """@brief Return a fresh iterator over the named script.
        @exception UnknownScriptError No script has the given name.
        """
        script = self.get(name)
        if script is None:
            raise exceptions.UnknownScriptError(f"no script named '{name}'")
        return ScriptIterator(script)

    @property
    def names(self) -> List[str]:
        """@brief Names of the effective scripts, in the order they were first added."""
        return [self.get(key).name for key in self._scripts]

    @property
    def effective_scripts(self) -> List[CompiledScript]:
        return [self.get(key) for key in self._scripts]

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._scripts

    def __len__(self) -> int:
        """@brief Number of compiled scripts, including those shadowed by another of the same name."""
        return self._count

class ScriptIterator:
    """@brief Forward-only iterator over the instructions of one compiled script.

    A new iterator starts at the first instruction. Get another one from
    ScriptRegistry.iterate() to run a script again.
    """

    def __init__(self, script: CompiledScript) -> None:
        self._script = script
        self._position = 0

    @property
    def script(self) -> CompiledScript:
        return self._script

    @property
    def name(self) -> str:
        return self._script.name

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_exhausted(self) -> bool:
        return self._position >= len(self._script)

    def __iter__(self) -> Iterator[CompiledInstruction]:
        return self

    def __next__(self) -> CompiledInstruction:
        if self.is_exhausted:
            raise StopIteration
        instruction = self._script[self._position]
        self._position += 1
        return instruction

    def __repr__(self) -> str:
        return f"<{type(self).__name__}@{id(self):x} {self.name} {self._position}/{len(self._script)}>"

class ReplayCursor:
    """@brief Single shared position for pulling script instructions one at a time.

    Pulling with the same name continues the bound script. Pulling with a different name binds
    that script at its first instruction, abandoning the previous position, so switching away from a
    script and back restarts it. Passing None continues with the bound script.

    The registry contents are only referenced; resetting the cursor does not touch them.
    """

    def __init__(self, registry: ScriptRegistry) -> None:
        self._registry = registry
        self._iterator: Optional[ScriptIterator] = None

    @property
    def is_bound(self) -> bool:
        return self._iterator is not None

    @property
    def name(self) -> Optional[str]:
        """@brief Name of the bound script, or None."""
        return self._iterator.name if self._iterator is not None else None

    @property
    def position(self) -> int:
        return self._iterator.position if self._iterator is not None else 0

    def next(self, name: Optional[str] = None) -> CompiledInstruction:
        """@brief Return the next instruction of the named script.

        @exception UnknownScriptError No script has the given name, or `name` is None while the
            cursor is not bound. The cursor is left unchanged.
        @exception ScriptExhaustedError The bound script has no more instructions.
        """
        if name is None:
            if self._iterator is None:
                raise exceptions.UnknownScriptError("no active script")
        elif self._iterator is None or name.lower() != self._iterator.name.lower():
            self._iterator = self._registry.iterate(name)
            TRACE.debug("bound cursor to '%s'", self._iterator.name)

        try:
            instruction = next(self._iterator)
        except StopIteration:
            raise exceptions.ScriptExhaustedError(f"end of script '{self._iterator.name}'") from None
        TRACE.debug("%s[%d]: %s", self._iterator.name, self._iterator.position - 1, instruction)
        return instruction

    def reset(self) -> None:
        """@brief Unbind the cursor so the next pull starts a script from its first instruction."""
        self._iterator = None
