# regscript
# Copyright (c) 2015-2020 Arm Limited
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

def bitmask(*args):
    """@brief Returns a mask with specified bit ranges set.

    Each argument may be either a 2-tuple of integers (MSB, LSB) or an individual bit number.
    The result is the combination of masks produced by the arguments.

    Example:
    @code
      >>> hex(bitmask((7, 0)))
      0xff
      >>> hex(bitmask((31, 24), 1))
      0xff000002
    @endcode
    """
    mask = 0

    for a in args:
        if isinstance(a, tuple):
            hi, lo = a
            mask |= ((1 << (hi - lo + 1)) - 1) << lo
        elif isinstance(a, int):
            mask |= 1 << a

    return mask

def bit_invert(value, width=32):
    """@brief Return the bitwise inverted value of the argument given a specified width.

    @param value Integer value to be inverted.
    @param width Bit width of both the input and output. If not supplied, this defaults to 32.
    @return Integer of the bitwise inversion of @a value.
    """
    return ((1 << width) - 1) & (~value)

def size_mask(size):
    """@brief Return the mask covering an access of `size` bytes."""
    return bitmask((size * 8 - 1, 0))

def mask32(value):
    """@brief Truncate a value to an unsigned 32-bit integer."""
    return value & 0xffffffff
