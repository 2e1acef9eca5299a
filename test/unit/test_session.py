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

import os
import pytest

from regscript.core import exceptions
from regscript.core.session import ScriptSession
from regscript.script.formatter import PARAM_ABSENT
from regscript.script.definitions import Tier

SWO_PARAMS = [2, 71, 1000000, PARAM_ABSENT]

@pytest.fixture(scope='function')
def session(tmp_path):
    return ScriptSession(project_dir=str(tmp_path), no_config=True, no_overlay=True)

@pytest.fixture(scope='function')
def stm32(session):
    session.load("STM32F407", "M4")
    return session

@pytest.fixture(scope='function')
def cortex_m0(session):
    session.load("LPC1114", "M0")
    return session

class TestRun(object):
    def test_swo_generic(self, stm32):
        commands = stm32.run("swo_generic", SWO_PARAMS)
        assert commands == [
            "set {int}0xe000edfc = 0x1000000\n",
            "set {int}0xe0040004 = 0x1\n",
            "set {int}0xe00400f0 = 0x2\n",
            "set {int}0xe0040010 = 0x47\n",
            "set {int}0xe0040304 = 0x0\n",
            "set {int}0xe0000fb0 = 0xc5acce55\n",
            "set {int}0xe0000e80 = 0x11\n",
            "set {int}0xe0000e40 = 0x0\n",
            ]

    def test_swo_device(self, stm32):
        commands = stm32.run("swo_device")
        assert len(commands) == 7
        assert commands[0] == "set {int}0x40023830 |= 0x2\n"
        assert commands[1] == "set {int}0x40020400 &= 0xffffff3f\n"

    def test_run_twice(self, stm32):
        assert stm32.run("swo_channels", [0xff]) == ["set {int}0xe0000e00 = 0xff\n"]
        assert stm32.run("SWO_CHANNELS", [0xff]) == ["set {int}0xe0000e00 = 0xff\n"]

    def test_unknown(self, stm32):
        assert stm32.run("memremap") == []

    def test_not_loaded(self, session):
        assert session.run("swo_generic", SWO_PARAMS) == []

    def test_absent_symbol_skipped(self, cortex_m0):
        assert cortex_m0.run("swo_generic", SWO_PARAMS) == []
        assert cortex_m0.run("swo_channels", [0x3, None]) == []

    def test_symbol_address(self, cortex_m0):
        assert cortex_m0.run("swo_generic", [2, 71, 1000000, 0x10000200]) == [
            "set {int}0x10000200 = 0xf4240\n"]
        assert cortex_m0.run("swo_channels", [0x3, 0x10000204]) == [
            "set {int}0x10000204 = 0x3\n"]

    def test_missing_params_skipped(self, stm32):
        # The two parameter lines are skipped.
        assert len(stm32.run("swo_generic")) == 6

class TestNextCommand(object):
    def test_pull(self, stm32):
        assert stm32.next_command("swo_generic", SWO_PARAMS) == "set {int}0xe000edfc = 0x1000000\n"
        assert stm32.next_command("swo_generic", SWO_PARAMS) == "set {int}0xe0040004 = 0x1\n"
        assert stm32.next_command(None, SWO_PARAMS) == "set {int}0xe00400f0 = 0x2\n"

    def test_unresolved_advances(self, cortex_m0):
        with pytest.raises(exceptions.UnresolvedParameterError):
            cortex_m0.next_command("swo_generic", SWO_PARAMS)
        with pytest.raises(exceptions.ScriptExhaustedError):
            cortex_m0.next_command("swo_generic", SWO_PARAMS)

    def test_reset_cache(self, stm32):
        first = stm32.next_command("swo_device")
        stm32.next_command("swo_device")
        stm32.reset_cache()
        assert stm32.next_command("swo_device") == first

    def test_unknown(self, stm32):
        with pytest.raises(exceptions.UnknownScriptError):
            stm32.next_command("memremap")

    def test_next_instruction(self, stm32):
        instr = stm32.next_instruction("swo_channels")
        assert str(instr) == "ITM_TER = $0 (4 bytes)"

class TestIntrospection(object):
    def test_loaded(self, stm32):
        assert stm32.is_loaded
        assert stm32.mcu == "STM32F407"
        assert stm32.arch == "M4"
        assert "RCC_AHB1ENR" in [r.name for r in stm32.registers]
        assert [s.name for s in stm32.scripts] == ["swo_device", "swo_generic", "swo_channels"]
        assert stm32.errors == []

    def test_iter_script(self, stm32):
        stm32.next_command("swo_generic", SWO_PARAMS)
        assert len(list(stm32.iter_script("swo_generic"))) == 8
        # The replay cursor is not affected.
        assert stm32.next_command("swo_generic", SWO_PARAMS) == "set {int}0xe0040004 = 0x1\n"

    def test_context_manager(self, tmp_path):
        with ScriptSession(project_dir=str(tmp_path), no_config=True) as session:
            session.load("STM32F407")
            assert session.is_loaded
        assert not session.is_loaded

    def test_repr(self, stm32):
        assert "STM32F407" in repr(stm32)

class TestOverlayFile(object):
    OVERLAY = "define swo_channels [*]\n  ITM_TER = 0x1\nend\n"

    def test_default_overlay(self, tmp_path):
        (tmp_path / "regscript.def").write_text(self.OVERLAY)
        session = ScriptSession(project_dir=str(tmp_path), no_config=True)
        assert session.overlay_path == str(tmp_path / "regscript.def")
        session.load("STM32F407")
        assert session.database.registry.get("swo_channels").tier is Tier.OVERLAY
        assert session.run("swo_channels", [0xff]) == ["set {int}0xe0000e00 = 0x1\n"]

    def test_hidden_default_overlay(self, tmp_path):
        (tmp_path / ".regscript.def").write_text(self.OVERLAY)
        session = ScriptSession(project_dir=str(tmp_path), no_config=True)
        assert session.overlay_path == str(tmp_path / ".regscript.def")

    def test_no_overlay(self, tmp_path):
        (tmp_path / "regscript.def").write_text(self.OVERLAY)
        session = ScriptSession(project_dir=str(tmp_path), no_config=True, no_overlay=True)
        assert session.overlay_path is None
        session.load("STM32F407")
        assert session.database.registry.get("swo_channels").tier is Tier.BUILTIN

    def test_overlay_file_option_relative(self, tmp_path):
        (tmp_path / "custom.def").write_text(self.OVERLAY)
        session = ScriptSession(project_dir=str(tmp_path), no_config=True, overlay_file="custom.def")
        assert session.overlay_path == str(tmp_path / "custom.def")

    def test_no_overlay_found(self, tmp_path):
        session = ScriptSession(project_dir=str(tmp_path), no_config=True)
        assert session.overlay_path is None

class TestConfigFile(object):
    def test_config_sets_overlay(self, tmp_path):
        (tmp_path / "custom.def").write_text(TestOverlayFile.OVERLAY)
        (tmp_path / "regscript.yaml").write_text("overlay_file: custom.def\n")
        session = ScriptSession(project_dir=str(tmp_path))
        assert session.options.get('overlay_file') == "custom.def"
        assert session.overlay_path == str(tmp_path / "custom.def")

    def test_kwargs_override_config(self, tmp_path):
        (tmp_path / "regscript.yml").write_text("no_overlay: false\n")
        session = ScriptSession(project_dir=str(tmp_path), no_overlay=True)
        assert session.options.get('no_overlay') is True

    def test_config_file_option(self, tmp_path):
        (tmp_path / "other.yaml").write_text("no_overlay: true\n")
        session = ScriptSession(project_dir=str(tmp_path), config_file="other.yaml")
        assert session.options.get('no_overlay') is True

    def test_no_config(self, tmp_path):
        (tmp_path / "regscript.yaml").write_text("no_overlay: true\n")
        session = ScriptSession(project_dir=str(tmp_path), no_config=True)
        assert session.options.get('no_overlay') is False

    def test_empty_config(self, tmp_path):
        (tmp_path / "regscript.yaml").write_text("")
        session = ScriptSession(project_dir=str(tmp_path))
        assert session.options.get('no_overlay') is False

    def test_invalid_config(self, tmp_path):
        (tmp_path / "regscript.yaml").write_text("- a\n- b\n")
        with pytest.raises(exceptions.Error):
            ScriptSession(project_dir=str(tmp_path))

    def test_option_defaults_lowest_priority(self, tmp_path):
        (tmp_path / "regscript.yaml").write_text("debug.traceback: true\n")
        session = ScriptSession(project_dir=str(tmp_path), option_defaults={'debug.traceback': False})
        assert session.log_tracebacks is True

    def test_project_dir_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv('REGSCRIPT_PROJECT_DIR', str(tmp_path))
        session = ScriptSession(no_config=True)
        assert session.project_dir == str(tmp_path)

    def test_project_dir_expanded(self, tmp_path):
        session = ScriptSession(project_dir=str(tmp_path / "sub" / ".."), no_config=True)
        assert session.project_dir == os.path.abspath(str(tmp_path))
