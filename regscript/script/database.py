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
from typing import (Dict, List, Optional, Sequence)

from ..core import exceptions
from . import builtin
from .definitions import (RegisterDefinition, ScriptDefinition)
from .matcher import (matches, matches_mcu_or_arch)
from .overlay import (OverlayContents, read_overlay)
from .parser import compile_script
from .registry import (ReplayCursor, ScriptRegistry)

LOG = logging.getLogger(__name__)

class DefinitionDatabase:
    """@brief Registers and compiled scripts for one MCU.

    Definitions come from two tiers. The built-in catalog is loaded first, then the optional user
    overlay file is applied on top. Overlay registers replace built-in registers of the same name,
    and overlay scripts take precedence over built-in scripts of the same name.

    The database also owns the replay cursor, since the cursor refers to compiled scripts that only
    live as long as the MCU stays loaded.
    """

    def __init__(
            self,
            builtin_registers: Optional[Sequence[RegisterDefinition]] = None,
            builtin_scripts: Optional[Sequence[ScriptDefinition]] = None
            ) -> None:
        """@brief Constructor.

        @param self
        @param builtin_registers Built-in register catalog. Defaults to the regscript catalog.
        @param builtin_scripts Built-in script catalog. Defaults to the regscript catalog.
        """
        self._builtin_registers = (builtin.BUILTIN_REGISTERS
                if builtin_registers is None else builtin_registers)
        self._builtin_scripts = (builtin.BUILTIN_SCRIPTS
                if builtin_scripts is None else builtin_scripts)
        self._mcu: Optional[str] = None
        self._arch: Optional[str] = None
        self._registers: Dict[str, RegisterDefinition] = OrderedDict()
        self._registry = ScriptRegistry()
        self._cursor = ReplayCursor(self._registry)
        self._errors: List[exceptions.Error] = []

    @property
    def mcu(self) -> Optional[str]:
        """@brief MCU name the database is loaded for, or None."""
        return self._mcu

    @property
    def arch(self) -> Optional[str]:
        return self._arch

    @property
    def is_loaded(self) -> bool:
        return self._mcu is not None

    @property
    def registers(self) -> Dict[str, RegisterDefinition]:
        """@brief Map of register name to definition, in load order."""
        return self._registers

    @property
    def registry(self) -> ScriptRegistry:
        return self._registry

    @property
    def cursor(self) -> ReplayCursor:
        return self._cursor

    @property
    def errors(self) -> List[exceptions.Error]:
        """@brief Problems found in the overlay file during the last load.

        Each entry is an OverlayError for a malformed line, or the compile error of an overlay
        script that was dropped.
        """
        return self._errors

    def load(self, mcu: str, arch: Optional[str] = None, overlay_path: Optional[str] = None) -> int:
        """@brief Load registers and compile scripts for an MCU.

        Loading the same MCU again does nothing, which preserves the replay cursor. Loading a
        different MCU first clears the database.

        @param self
        @param mcu MCU family name, possibly with an architecture suffix.
        @param arch Optional core architecture name such as "M0" or "M4". Scripts whose
            applicability list contains the bracketed architecture, e.g. "[M0]", are selected too.
        @param overlay_path Optional path to the user overlay file.
        @return The number of compiled scripts, including scripts shadowed by another with the
            same name.

        @exception InternalError A built-in script fails to compile for the MCU, for instance
            because it refers to a register that isn't defined for it.
        @exception PatternError The MCU name is empty.
        """
        if self._mcu is not None and self._mcu == mcu:
            LOG.debug("scripts for %s already loaded", mcu)
            return len(self._registry)
        self.clear()

        overlay = read_overlay(overlay_path) if overlay_path else OverlayContents()
        self._errors.extend(overlay.errors)
        arch = arch or ""

        self._load_builtin_registers(mcu)
        self._apply_overlay_registers(mcu, overlay)

        order = 0
        for definition in self._builtin_scripts:
            if not matches_mcu_or_arch(mcu, arch, definition.applicability):
                continue
            try:
                script = compile_script(definition, self._registers, order)
            except exceptions.ScriptError as err:
                self.clear()
                raise exceptions.InternalError(f"built-in {err}") from err
            self._registry.add(script)
            order += 1

        for definition in overlay.scripts:
            try:
                if not matches_mcu_or_arch(mcu, arch, definition.applicability):
                    continue
                script = compile_script(definition, self._registers, order)
            except exceptions.Error as err:
                LOG.warning("Skipping overlay script '%s': %s", definition.name, err)
                self._errors.append(err)
                continue
            self._registry.add(script)
            order += 1

        self._mcu = mcu
        self._arch = arch or None
        LOG.info("Loaded %d registers and %d scripts for %s", len(self._registers), len(self._registry), mcu)
        return len(self._registry)

    def _load_builtin_registers(self, mcu: str) -> None:
        for reg in self._builtin_registers:
            if not matches(mcu, reg.applicability):
                continue
            if reg.name in self._registers:
                LOG.debug("ignoring duplicate built-in register %s", reg.name)
                continue
            self._registers[reg.name] = RegisterDefinition(reg.name, reg.address, reg.size)

    def _apply_overlay_registers(self, mcu: str, overlay: OverlayContents) -> None:
        for reg in overlay.registers:
            try:
                if not matches(mcu, reg.applicability):
                    continue
            except exceptions.PatternError as err:
                overlay_err = exceptions.OverlayError(str(err), path=overlay.path, line=reg.line)
                LOG.warning("Overlay file %s", overlay_err)
                self._errors.append(overlay_err)
                continue

            existing = self._registers.get(reg.name)
            if existing is not None:
                LOG.debug("overlay redefines %s: %#010x -> %#010x", reg.name, existing.address, reg.address)
                existing.address = reg.address
                existing.size = reg.size
            else:
                self._registers[reg.name] = RegisterDefinition(reg.name, reg.address, reg.size)

    def clear(self) -> None:
        """@brief Discard all registers, compiled scripts, and the replay cursor position.

        Safe to call when nothing is loaded.
        """
        self._cursor.reset()
        self._registry.clear()
        self._registers.clear()
        self._errors = []
        self._mcu = None
        self._arch = None
