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

from __future__ import annotations

import logging
import logging.config
import os
import yaml
from typing import (Any, Dict, List, Mapping, Optional, cast, TYPE_CHECKING)
from typing_extensions import Self

from . import exceptions
from .options_manager import OptionsManager
from ..script.database import DefinitionDatabase
from ..script.formatter import (Params, format_instruction)
from ..script.instructions import CompiledInstruction

if TYPE_CHECKING:
    from types import TracebackType
    from ..script.definitions import RegisterDefinition
    from ..script.instructions import CompiledScript
    from ..script.registry import ScriptIterator

LOG = logging.getLogger(__name__)

## @brief Set of default config filenames to search for.
_CONFIG_FILE_NAMES = [
        "regscript.yaml",
        "regscript.yml",
        ".regscript.yaml",
        ".regscript.yml",
    ]

## @brief Set of default overlay file names to search for.
_OVERLAY_FILE_NAMES = [
        "regscript.def",
        ".regscript.def",
    ]

class ScriptSession:
    """@brief Register scripts for the currently loaded MCU.

    A session owns one DefinitionDatabase, and through it the compiled scripts and the replay
    cursor. Independent sessions do not share any state.

    Session options are merged from several sources, in order of precedence:

    1. Keyword arguments to constructor.
    2. _options_ parameter to constructor.
    3. Options from a config file.
    4. _option_defaults_ parameter to constructor.

    A ScriptSession can be used as a context manager. Leaving the **with** block clears any loaded
    definitions.

    Typical use:
    @code
    with ScriptSession(project_dir="/path/to/project") as session:
        session.load("STM32F407", "M4")
        for command in session.run("swo_generic", [2, 71, 1000000, PARAM_ABSENT]):
            send_to_probe(command)
    @endcode
    """

    def __init__(
            self,
            options: Optional[Mapping[str, Any]] = None,
            option_defaults: Optional[Mapping[str, Any]] = None,
            **kwargs
            ) -> None:
        """@brief Session constructor.

        @param self
        @param options Optional session options dictionary.
        @param option_defaults Optional dictionary of session option values. This dictionary has the
            lowest priority in determining final session option values.
        @param kwargs Session options passed as keyword arguments.
        """
        self._options = OptionsManager()
        self._database = DefinitionDatabase()

        # Update options.
        self._options.add_front(kwargs)
        self._options.add_back(options)

        # Init project directory.
        if self.options.get('project_dir') is None:
            self._project_dir: str = os.environ.get('REGSCRIPT_PROJECT_DIR') or os.getcwd()
        else:
            self._project_dir = os.path.abspath(os.path.expanduser(self.options.get('project_dir')))
        LOG.debug("Project directory: %s", self.project_dir)

        # Load options from the config file.
        self._options.add_back(self._get_config())

        # Merge in lowest priority options.
        self._options.add_back(option_defaults)

        self._configure_logging()

    def _get_config(self) -> Dict[str, Any]:
        # Load config file if one was provided via options, and no_config option was not set.
        if not self.options.get('no_config'):
            config_path = self.find_user_file('config_file', _CONFIG_FILE_NAMES)

            if config_path is not None:
                try:
                    with open(config_path, 'r') as config_file:
                        LOG.debug("Loading config from: %s", config_path)
                        config = yaml.safe_load(config_file)
                        # Allow an empty config file.
                        if config is None:
                            return {}
                        # But fail if someone tries to put something other than a dict at the top.
                        elif not isinstance(config, dict):
                            raise exceptions.Error("configuration file %s does not contain a top-level dictionary"
                                    % config_path)
                        return config
                except IOError as err:
                    LOG.warning("Error attempting to access config file '%s': %s", config_path, err)

        return {}

    def find_user_file(self, option_name: Optional[str], filename_list: List[str]) -> Optional[str]:
        """@brief Search the project directory for a file.

        @retval None No matching file was found.
        @retval string An absolute path to the requested file.
        """
        if option_name is not None:
            file_path = self.options.get(option_name)
        else:
            file_path = None

        # Look for default filenames if a path wasn't provided.
        if file_path is None:
            for filename in filename_list:
                this_path = os.path.expanduser(filename)
                if not os.path.isabs(this_path):
                    this_path = os.path.join(self.project_dir, filename)
                if os.path.isfile(this_path):
                    file_path = this_path
                    break
        # Use the path passed in options, which may be absolute, relative to the
        # home directory, or relative to the project directory.
        else:
            file_path = os.path.expanduser(file_path)
            if not os.path.isabs(file_path):
                file_path = os.path.join(self.project_dir, file_path)

        return file_path

    def _configure_logging(self) -> None:
        """@brief Load a logging config dict or file."""
        config_value = self.options.get('logging')

        # Allow logging setting to refer to another file.
        if isinstance(config_value, str):
            logging_config_path = self.find_user_file(None, [config_value])

            if logging_config_path is None:
                LOG.warning("Logging config file '%s' does not exist", config_value)
                return
            try:
                with open(logging_config_path, 'r') as config_file:
                    config = yaml.safe_load(config_file)
                    LOG.debug("Using logging configuration from: %s", logging_config_path)
            except IOError as err:
                LOG.warning("Error attempting to load logging config file '%s': %s", config_value, err)
                return
        else:
            config = config_value

        if config is not None:
            # Stuff a version key if it's missing, to make it easier to use.
            if 'version' not in config:
                config['version'] = 1
            # Set a different default for disabling existing loggers.
            if 'disable_existing_loggers' not in config:
                config['disable_existing_loggers'] = False
            # Remove an empty 'loggers' key.
            if ('loggers' in config) and (config['loggers'] is None):
                del config['loggers']

            try:
                logging.config.dictConfig(config)
            except (ValueError, TypeError, AttributeError, ImportError) as err:
                LOG.warning("Error applying logging configuration: %s", err)

    @property
    def options(self) -> OptionsManager:
        """@brief The OptionsManager object."""
        return self._options

    @property
    def project_dir(self) -> str:
        """@brief Path to the project directory."""
        return self._project_dir

    @property
    def log_tracebacks(self) -> bool:
        """@brief Quick access to debug.traceback option."""
        return cast(bool, self.options.get('debug.traceback'))

    @property
    def overlay_path(self) -> Optional[str]:
        """@brief Path of the overlay file to load, or None if there isn't one."""
        if self.options.get('no_overlay'):
            return None
        return self.find_user_file('overlay_file', _OVERLAY_FILE_NAMES)

    @property
    def database(self) -> DefinitionDatabase:
        return self._database

    @property
    def mcu(self) -> Optional[str]:
        return self._database.mcu

    @property
    def arch(self) -> Optional[str]:
        return self._database.arch

    @property
    def is_loaded(self) -> bool:
        return self._database.is_loaded

    @property
    def registers(self) -> List[RegisterDefinition]:
        """@brief Registers defined for the loaded MCU."""
        return list(self._database.registers.values())

    @property
    def scripts(self) -> List[CompiledScript]:
        """@brief The script used for each name, after applying precedence."""
        return self._database.registry.effective_scripts

    @property
    def errors(self) -> List[exceptions.Error]:
        """@brief Overlay problems found by the last load."""
        return self._database.errors

    def load(self, mcu: str, arch: Optional[str] = None) -> int:
        """@brief Load definitions and compile scripts for an MCU.
        @return Number of compiled scripts.
        """
        return self._database.load(mcu, arch, self.overlay_path)

    def clear(self) -> None:
        """@brief Unload all definitions and scripts."""
        self._database.clear()

    def reset_cache(self) -> None:
        """@brief Reset the replay cursor so the same script can be run again from the start."""
        self._database.cursor.reset()

    def next_instruction(self, name: Optional[str] = None) -> CompiledInstruction:
        """@brief Pull the next instruction of a script.

        See ReplayCursor.next() for how the name selects and continues scripts.

        @exception UnknownScriptError
        @exception ScriptExhaustedError
        """
        return self._database.cursor.next(name)

    def next_command(self, name: Optional[str] = None, params: Optional[Params] = None) -> str:
        """@brief Pull the next instruction of a script and render it as a command.

        The cursor advances even if formatting fails, so after an UnresolvedParameterError the
        caller can simply call again to continue with the next instruction.

        @exception UnknownScriptError
        @exception ScriptExhaustedError
        @exception UnresolvedParameterError
        """
        return format_instruction(self.next_instruction(name), params)

    def iter_script(self, name: str) -> ScriptIterator:
        """@brief Return a fresh iterator over a script, independent of the replay cursor."""
        return self._database.registry.iterate(name)

    def run(self, name: str, params: Optional[Params] = None) -> List[str]:
        """@brief Render every instruction of a script.

        The replay cursor is reset first, so the script always runs from its first instruction.
        Instructions that need an absent runtime parameter are skipped.

        @return List of command strings. The list is empty if no script has the given name.
        """
        self.reset_cache()
        commands = []
        while True:
            try:
                commands.append(self.next_command(name, params))
            except exceptions.UnresolvedParameterError as err:
                LOG.debug("skipping instruction of '%s': %s", name, err)
            except exceptions.UnknownScriptError:
                LOG.debug("no script '%s' for %s", name, self.mcu)
                break
            except exceptions.ScriptExhaustedError:
                break
        return commands

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: Optional[type], value: Optional[BaseException],
            traceback: Optional[TracebackType]) -> bool:
        self.clear()
        return False

    def __repr__(self) -> str:
        return f"<{type(self).__name__}@{id(self):x} mcu={self.mcu} arch={self.arch}>"
