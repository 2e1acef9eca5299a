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

import pytest

from regscript.core import exceptions
from regscript.script.database import DefinitionDatabase
from regscript.script.definitions import (RegisterDefinition, ScriptDefinition, Tier)
from regscript.script.instructions import (Literal, Operator, Parameter, RegisterRef)

OVERLAY_TEXT = """\
define RCC_AHB1ENR [STM32F4*] = 0x50000000
define MY_REG [STM32F40x] = {short} 0x20000000
define OTHER [LPC*] = 0x1
define BAD_PATTERN [LPC*1] = 0x2

define swo_device [STM32F4*]
  MY_REG = 1
  RCC_AHB1ENR |= 4
end

define broken [*]
  UNKNOWN_REG = 1
end

define bad_syntax [*]
  MY_REG === 1
end

define lpc_only [LPC17xx]
  NOT_CHECKED = 1
end
"""

@pytest.fixture(scope='function')
def db():
    return DefinitionDatabase()

@pytest.fixture(scope='function')
def overlay_path(tmp_path):
    path = tmp_path / "regscript.def"
    path.write_text(OVERLAY_TEXT)
    return str(path)

class TestBuiltinLoad(object):
    def test_stm32f4(self, db):
        assert db.load("STM32F407", "M4") == 3
        assert db.is_loaded
        assert db.mcu == "STM32F407"
        assert db.arch == "M4"
        assert db.registry.names == ["swo_device", "swo_generic", "swo_channels"]
        assert len(db.registry.get("swo_device")) == 7
        assert len(db.registry.get("swo_generic")) == 8
        assert "memremap" not in db.registry
        assert db.errors == []

    def test_registers_for_mcu(self, db):
        db.load("STM32F407")
        assert db.registers["RCC_AHB1ENR"].address == 0x40023830
        assert "SCB_DEMCR" in db.registers
        assert "RCC_APB2ENR" not in db.registers
        assert "TRACECLKDIV" not in db.registers

    def test_register_per_family(self, db):
        db.load("LPC1549")
        assert db.registers["SYSCON_SYSMEMREMAP"].address == 0x40074000
        db.load("LPC1114")
        assert db.registers["SYSCON_SYSMEMREMAP"].address == 0x40048000

    def test_arch_scripts(self, db):
        # Both the generic and the [M0] scripts are compiled; the [M0] one is declared later.
        assert db.load("LPC1114", "M0") == 5
        assert len(db.registry) == 5
        generic = db.registry.get("swo_generic")
        assert len(generic) == 1
        assert generic[0].destination == Parameter(3)
        assert len(db.registry.candidates("swo_generic")) == 2

    def test_arch_suffix_in_name(self, db):
        assert db.load("LPC1343 M3") == 4
        assert "swo_device" in db.registry

    def test_no_arch(self, db):
        db.load("LPC1114")
        assert db.arch is None
        assert len(db.registry.get("swo_generic")) == 8

    def test_compiled_instruction(self, db):
        db.load("LPC1343")
        instr = db.registry.get("memremap")[0]
        assert instr.destination == RegisterRef("SYSCON_SYSMEMREMAP", 0x40048000)
        assert instr.operator is Operator.ASSIGN
        assert instr.value == Literal(2)

    def test_inverted_builtin_lines(self, db):
        db.load("STM32F746")
        moder_clear = db.registry.get("swo_device")[1]
        assert moder_clear.operator is Operator.CLEAR_BITS
        assert moder_clear.value == Literal(0xffffff3f)

    @pytest.mark.parametrize("mcu", [
        "LPC810", "LPC1114", "LPC11U68", "LPC1227", "LPC1343", "LPC1549", "LPC1769", "LPC2148",
        "LPC2378", "LPC4357", "STM32F03", "STM32F103", "STM32F205", "STM32F303", "STM32F407",
        "STM32F746", "nRF52832", "EFM32GG",
        ])
    @pytest.mark.parametrize("arch", [None, "M0", "M3", "M4"])
    def test_builtin_catalog_consistent(self, db, mcu, arch):
        assert db.load(mcu, arch) >= 2

class TestIdempotence(object):
    def test_same_mcu_no_reload(self, db):
        count = db.load("STM32F407", "M4")
        db.cursor.next("swo_generic")
        assert db.load("STM32F407", "M4") == count
        assert db.cursor.position == 1
        assert db.cursor.next().destination.name == "TPIU_CSPSR"

    def test_different_mcu_clears(self, db):
        db.load("STM32F407")
        db.cursor.next("swo_generic")
        db.load("LPC1343")
        assert not db.cursor.is_bound
        assert "RCC_AHB1ENR" not in db.registers
        assert "memremap" in db.registry

class TestOverlay(object):
    def test_register_override(self, db, overlay_path):
        db.load("STM32F407", overlay_path=overlay_path)
        assert db.registers["RCC_AHB1ENR"].address == 0x50000000
        assert db.registers["MY_REG"].size == 2
        assert "OTHER" not in db.registers

    def test_override_keeps_order(self, db, overlay_path):
        db.load("STM32F407", overlay_path=overlay_path)
        names = list(db.registers)
        assert names[-1] == "MY_REG"
        reference = DefinitionDatabase()
        reference.load("STM32F407")
        assert names[:-1] == list(reference.registers)

    def test_builtin_scripts_use_overridden_registers(self, db, overlay_path):
        db.load("STM32F407", overlay_path=overlay_path)
        builtin_device = db.registry.candidates("swo_device")[-1]
        assert builtin_device.tier is Tier.BUILTIN
        assert builtin_device[0].destination == RegisterRef("RCC_AHB1ENR", 0x50000000)

    def test_overlay_script_precedence(self, db, overlay_path):
        count = db.load("STM32F407", overlay_path=overlay_path)
        assert count == 4
        script = db.registry.get("swo_device")
        assert script.tier is Tier.OVERLAY
        assert len(script) == 2
        assert script[0].destination == RegisterRef("MY_REG", 0x20000000)
        assert script[0].size == 2

    def test_overlay_errors(self, db, overlay_path):
        db.load("STM32F407", overlay_path=overlay_path)
        assert "broken" not in db.registry
        assert "bad_syntax" not in db.registry
        assert "lpc_only" not in db.registry
        kinds = sorted(type(e).__name__ for e in db.errors)
        assert kinds == ["OverlayError", "ScriptSyntaxError", "UnresolvedRegisterError"]
        pattern_error = [e for e in db.errors if isinstance(e, exceptions.OverlayError)][0]
        assert pattern_error.line == 4
        assert pattern_error.path == overlay_path

    def test_overlay_script_line_numbers(self, db, overlay_path):
        db.load("STM32F407", overlay_path=overlay_path)
        syntax_error = [e for e in db.errors if isinstance(e, exceptions.ScriptSyntaxError)][0]
        assert "script 'bad_syntax' line 16" in str(syntax_error)

    def test_later_overlay_line_wins(self, db, tmp_path):
        path = tmp_path / "twice.def"
        path.write_text(
                "define RCC_AHB1ENR [STM32F4*] = 0x50000000\n"
                "define RCC_AHB1ENR [STM32F4*] = 0x60000000\n")
        db.load("STM32F407", overlay_path=str(path))
        assert db.registers["RCC_AHB1ENR"].address == 0x60000000
        assert list(db.registers).count("RCC_AHB1ENR") == 1

        db.clear()
        db.load("STM32F407", overlay_path=str(path))
        assert db.registers["RCC_AHB1ENR"].address == 0x60000000
        assert list(db.registers).count("RCC_AHB1ENR") == 1
        assert [r.address for r in db.registers.values()].count(0x60000000) == 1

    def test_missing_overlay_file(self, db, tmp_path):
        assert db.load("STM32F407", overlay_path=str(tmp_path / "none.def")) == 3

class TestCustomCatalog(object):
    def test_unresolved_builtin_register(self):
        db = DefinitionDatabase(
                builtin_registers=[RegisterDefinition("A", 0x100, 4, "*")],
                builtin_scripts=[ScriptDefinition("s", "*", "A = 1\nB = 1")])
        with pytest.raises(exceptions.InternalError):
            db.load("ANY")
        assert not db.is_loaded
        assert len(db.registry) == 0
        assert len(db.registers) == 0

    @pytest.mark.parametrize("body", ["A === 1", "A = ~$0"])
    def test_builtin_compile_error(self, body):
        db = DefinitionDatabase(
                builtin_registers=[RegisterDefinition("A", 0x100, 4, "*")],
                builtin_scripts=[ScriptDefinition("s", "*", body)])
        with pytest.raises(exceptions.InternalError):
            db.load("ANY")
        assert not db.is_loaded
        assert len(db.registers) == 0

    def test_unresolved_only_when_applicable(self):
        db = DefinitionDatabase(
                builtin_registers=[RegisterDefinition("A", 0x100, 4, "FOO*")],
                builtin_scripts=[ScriptDefinition("s", "FOO*", "A = 1")])
        assert db.load("FOO1") == 1
        db.clear()
        # The script does not apply to BAR, so its missing register is not an error.
        assert db.load("BAR") == 0

    def test_duplicate_register_first_wins(self):
        db = DefinitionDatabase(
                builtin_registers=[
                    RegisterDefinition("A", 0x100, 4, "*"),
                    RegisterDefinition("A", 0x200, 4, "*"),
                    ],
                builtin_scripts=[])
        db.load("ANY")
        assert db.registers["A"].address == 0x100

    def test_catalog_not_modified_by_overlay(self, tmp_path):
        catalog = [RegisterDefinition("A", 0x100, 4, "*")]
        path = tmp_path / "o.def"
        path.write_text("define A [*] = 0x300\n")
        db = DefinitionDatabase(builtin_registers=catalog, builtin_scripts=[])
        db.load("ANY", overlay_path=str(path))
        assert db.registers["A"].address == 0x300
        assert catalog[0].address == 0x100

class TestClear(object):
    def test_clear(self, db):
        db.load("STM32F407")
        db.cursor.next("swo_generic")
        db.clear()
        assert not db.is_loaded
        assert db.mcu is None
        assert len(db.registry) == 0
        assert len(db.registers) == 0
        assert not db.cursor.is_bound

    def test_clear_unloaded(self, db):
        db.clear()
        assert not db.is_loaded

    def test_reload_after_clear(self, db):
        count = db.load("STM32F407")
        db.clear()
        assert db.load("STM32F407") == count

    def test_empty_mcu(self, db):
        with pytest.raises(exceptions.PatternError):
            db.load("")
        assert not db.is_loaded
