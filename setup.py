# regscript
# Copyright (c) 2012-2020 Arm Limited
# Copyright (c) 2021 Chris Reed
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
from setuptools import setup
from pathlib import Path

# Get the directory containing this setup.py, so relative paths in setup.cfg resolve no matter
# where the build is started from.
SCRIPT_DIR = Path(__file__).parent.resolve()
os.chdir(SCRIPT_DIR)

# The lark grammar is loaded relative to the parser module at import time, so a build without
# it would produce a package that can't be imported.
grammar_path = SCRIPT_DIR / "regscript" / "script" / "script.lark"
if not grammar_path.exists():
    raise RuntimeError("register script grammar file is missing")

setup()
