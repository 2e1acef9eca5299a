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
from regscript.script.matcher import (
    matches,
    matches_mcu_or_arch,
    name_matches,
    split_list,
    strip_architecture,
    )

class TestStripArchitecture(object):
    @pytest.mark.parametrize(("name", "result"), [
        ("LPC1343", "LPC1343"),
        ("LPC1114 M0", "LPC1114"),
        ("STM32F407 M4", "STM32F407"),
        ("STM32F303  M3/M4", "STM32F303"),
        ("LPC43xx Mx", "LPC43xx Mx"),
        ("LPC43xx m4", "LPC43xx m4"),
        ("Board M", "Board M"),
        ])
    def test_strip(self, name, result):
        assert strip_architecture(name) == result

class TestNameMatches(object):
    def test_exact(self):
        assert name_matches("LPC1343", "LPC1343")

    def test_case_insensitive(self):
        assert name_matches("lpc1343", "LPC1343")
        assert name_matches("STM32F407", "stm32f407")

    def test_length_mismatch(self):
        assert not name_matches("LPC134", "LPC1343")
        assert not name_matches("LPC13433", "LPC1343")

    def test_lowercase_x_wildcard(self):
        assert name_matches("LPC13xx", "LPC1343")
        assert name_matches("LPC13xx", "LPC1311")
        assert not name_matches("LPC13xx", "LPC1443")

    def test_uppercase_x_literal(self):
        assert not name_matches("LPC13XX", "LPC1343")
        assert name_matches("LPC13XX", "LPC13xx")

def test_split_list():
    assert split_list("a, b ,c") == ["a", "b", "c"]
    assert split_list(" a,,b, ") == ["a", "b"]
    assert split_list("") == []

class TestMatches(object):
    def test_single_wildcard_list(self):
        assert matches("LPC1343", "*")
        assert matches("ANYTHING", "*")
        assert matches("a", " * ")

    def test_wildcard_entry_in_list(self):
        assert matches("STM32F407", "LPC8xx, *")

    def test_same_length_with_x(self):
        assert matches("LPC1343", "LPC13xx")
        assert not matches("LPC1543", "LPC13xx")

    def test_no_implicit_prefix(self):
        # Without a "*" an entry must be the same length as the name.
        assert not matches("STM32F030", "STM32F03")
        assert matches("STM32F03", "STM32F03")

    def test_prefix_wildcard(self):
        assert matches("STM32F407", "STM32F4*")
        assert matches("STM32F4", "STM32F4*")
        assert matches("LPC1114", "LPC8xx,LPC11xx*")
        assert matches("LPC11U68", "LPC11xx*")
        assert not matches("STM32F3", "STM32F4*")
        assert not matches("STM32", "STM32F4*")

    def test_prefix_case_insensitive(self):
        assert matches("stm32f407", "STM32F4*")

    def test_list_entries_trimmed(self):
        assert matches("LPC1769", " LPC21xx , LPC17xx ")

    def test_no_match(self):
        assert not matches("LPC1769", "LPC21xx,LPC22xx,LPC23xx")
        assert not matches("LPC1769", "")

    def test_architecture_suffix_ignored(self):
        assert matches("LPC1114 M0", "LPC11xx")
        assert matches("STM32F407 M4", "STM32F4*")
        assert not matches("LPC1114 M0", "M0")

    def test_exact_before_prefix(self):
        # Either pass may match. The result is the same whatever the order of the entries.
        assert matches("LPC1343", "LPC1*,LPC13xx")
        assert matches("LPC1343", "LPC13xx,LPC1*")

    def test_bracketed_architecture(self):
        assert matches("[M0]", "[M0]")
        assert matches("[M0]", "*")
        assert not matches("[M0]", "[M4]")
        assert not matches("[M0]", "LPC8xx")

    def test_empty_name(self):
        with pytest.raises(exceptions.PatternError):
            matches("", "*")
        with pytest.raises(exceptions.PatternError):
            matches("   ", "LPC13xx")

    def test_misplaced_wildcard(self):
        with pytest.raises(exceptions.PatternError):
            matches("LPC1343", "LPC*13")
        with pytest.raises(exceptions.PatternError):
            matches("LPC1343", "LPC8*,**")

    def test_misplaced_wildcard_after_exact_match(self):
        # The same-length pass finishes before wildcard entries are examined.
        assert matches("LPC1343", "LPC1343,LPC*13")

class TestMatchesMcuOrArch(object):
    def test_mcu(self):
        assert matches_mcu_or_arch("LPC1114", "M0", "LPC11xx")

    def test_arch(self):
        assert matches_mcu_or_arch("LPC1114", "M0", "[M0]")
        assert not matches_mcu_or_arch("STM32F407", "M4", "[M0]")

    def test_empty_arch(self):
        assert not matches_mcu_or_arch("LPC1114", "", "[M0]")
        assert not matches_mcu_or_arch("LPC1114", "", "[]")
