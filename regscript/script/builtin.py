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

"""@brief Built-in register and script catalog.

Scripts and their runtime parameters:

- `memremap`: map flash to address 0 for flash programming. No parameters.
- `swo_device`: MCU-specific pin and clock setup for SWO tracing. No parameters.
- `swo_generic`: generic TPIU/ITM setup for SWO tracing.
    - `$0` mode: 1 = Manchester, 2 = asynchronous
    - `$1` CPU clock divider (MCU clock / bit rate - 1)
    - `$2` bit rate
    - `$3` address of the target variable holding the bit rate (Cortex-M0/M0+ only)
- `swo_channels`: enable stimulus channels.
    - `$0` enabled channel bit mask
    - `$1` address of the target variable holding the channel mask (Cortex-M0/M0+ only)
"""

from .definitions import (RegisterDefinition as Reg, ScriptDefinition as Script)

_LPC_M0 = "LPC8xx,LPC11xx*,LPC11Uxx,LPC12xx,LPC13xx"
_LPC_ARM7 = "LPC21xx,LPC22xx,LPC23xx,LPC24xx"
_STM32_F4_F7 = "STM32F4*,STM32F7*"
_STM32_ALL = "STM32F03,STM32F05,STM32F07,STM32F09,STM32F1*,STM32F2*,STM32F3*,STM32F4*,STM32F7*"

BUILTIN_REGISTERS = [
    # Memory mapping
    Reg("SYSCON_SYSMEMREMAP",   0x40048000, 4, _LPC_M0),
    Reg("SYSCON_SYSMEMREMAP",   0x40074000, 4, "LPC15xx"),
    Reg("SCB_MEMMAP",           0x400FC040, 4, "LPC17xx"),
    Reg("SCB_MEMMAP",           0xE01FC040, 4, _LPC_ARM7),
    Reg("M4MEMMAP",             0x40043100, 4, "LPC43xx*"),

    # STM32 clocks, GPIO and debug configuration
    Reg("RCC_APB2ENR",          0x40021018, 4, "STM32F1*"),
    Reg("AFIO_MAPR",            0x40010004, 4, "STM32F1*"),
    Reg("RCC_AHB1ENR",          0x40023830, 4, _STM32_F4_F7),
    Reg("GPIOB_MODER",          0x40020400, 4, _STM32_F4_F7),
    Reg("GPIOB_AFRL",           0x40020420, 4, _STM32_F4_F7),
    Reg("GPIOB_OSPEEDR",        0x40020408, 4, _STM32_F4_F7),
    Reg("GPIOB_PUPDR",          0x4002040C, 4, _STM32_F4_F7),
    Reg("DBGMCU_CR",            0xE0042004, 4, _STM32_ALL),

    # LPC trace clock and pin configuration
    Reg("TRACECLKDIV",          0x400480AC, 4, "LPC13xx"),
    Reg("TRACECLKDIV",          0x400740D8, 4, "LPC15xx"),
    Reg("IOCON_PIO0_9",         0x40044024, 4, "LPC13xx"),

    # Cortex-M debug registers
    Reg("SCB_DHCSR",            0xE000EDF0, 4, "*"),
    Reg("SCB_DCRSR",            0xE000EDF4, 4, "*"),
    Reg("SCB_DCRDR",            0xE000EDF8, 4, "*"),
    Reg("SCB_DEMCR",            0xE000EDFC, 4, "*"),

    # TPIU
    Reg("TPIU_SSPSR",           0xE0040000, 4, "*"),
    Reg("TPIU_CSPSR",           0xE0040004, 4, "*"),
    Reg("TPIU_ACPR",            0xE0040010, 4, "*"),
    Reg("TPIU_SPPR",            0xE00400F0, 4, "*"),
    Reg("TPIU_FFCR",            0xE0040304, 4, "*"),
    Reg("TPIU_DEVID",           0xE0040FC8, 4, "*"),

    # DWT
    Reg("DWT_CTRL",             0xE0001000, 4, "*"),
    Reg("DWT_CYCCNT",           0xE0001004, 4, "*"),

    # ITM
    Reg("ITM_TER",              0xE0000E00, 4, "*"),
    Reg("ITM_TPR",              0xE0000E40, 4, "*"),
    Reg("ITM_TCR",              0xE0000E80, 4, "*"),
    Reg("ITM_LAR",              0xE0000FB0, 4, "*"),
    Reg("ITM_IWR",              0xE0000EF8, 4, "*"),
    Reg("ITM_IRR",              0xE0000EFC, 4, "*"),
    Reg("ITM_IMCR",             0xE0000F00, 4, "*"),
    Reg("ITM_LSR",              0xE0000FB4, 4, "*"),
    ]

BUILTIN_SCRIPTS = [
    # Memory mapping for flash programming
    Script("memremap", _LPC_M0,
        "SYSCON_SYSMEMREMAP = 2"),
    Script("memremap", "LPC15xx",
        "SYSCON_SYSMEMREMAP = 2"),
    Script("memremap", "LPC17xx",
        "SCB_MEMMAP = 1"),
    Script("memremap", _LPC_ARM7,
        "SCB_MEMMAP = 1"),
    Script("memremap", "LPC43xx*",
        "M4MEMMAP = 0"),

    # MCU-specific configuration for SWO tracing
    Script("swo_device", "STM32F1*", """
        RCC_APB2ENR |= 1
        AFIO_MAPR |= 0x2000000      # 2 << 24
        DBGMCU_CR |= 0x20           # 1 << 5
        """),
    Script("swo_device", "STM32F03,STM32F05,STM32F07,STM32F09,STM32F2*,STM32F3*", """
        DBGMCU_CR |= 0x20           # 1 << 5
        """),
    Script("swo_device", _STM32_F4_F7, """
        RCC_AHB1ENR |= 0x02         # enable GPIOB clock
        GPIOB_MODER ~= 0x00c0       # PB3: use alternate function
        GPIOB_MODER |= 0x0080
        GPIOB_AFRL ~= 0xf000        # set AF0 (==TRACESWO) on PB3
        GPIOB_OSPEEDR |= 0x00c0     # set max speed on PB3
        GPIOB_PUPDR ~= 0x00c0       # no pull-up or pull-down on PB3
        DBGMCU_CR |= 0x20           # 1 << 5
        """),
    Script("swo_device", "LPC13xx", """
        TRACECLKDIV = 1
        IOCON_PIO0_9 = 0x93
        """),
    Script("swo_device", "LPC15xx", """
        TRACECLKDIV = 1
        """),

    # Generic configuration for SWO tracing
    Script("swo_generic", "*", """
        SCB_DEMCR = 0x1000000       # 1 << 24
        TPIU_CSPSR = 1              # protocol width = 1 bit
        TPIU_SPPR = $0              # 1 = Manchester, 2 = Asynchronous
        TPIU_ACPR = $1              # CPU clock divider
        TPIU_FFCR = 0               # turn off formatter, discard ETM output
        ITM_LAR = 0xC5ACCE55        # unlock access to ITM registers
        ITM_TCR = 0x11              # (1 << 4) | 1
        ITM_TPR = 0                 # privileged access is off
        """),
    # Cortex-M0/M0+ has no SWO; the target firmware reads the bit rate from a variable.
    Script("swo_generic", "[M0]",
        "$3 = $2"),

    # Channel enables
    Script("swo_channels", "*",
        "ITM_TER = $0               # enable stimulus channel(s)"),
    Script("swo_channels", "[M0]",
        "$1 = $0                    # mark channel(s) as enabled"),
    ]
