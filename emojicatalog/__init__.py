# vim:et sts=4 sw=4
#
# emojicatalog - Unicode emoji reference data for Python
#
# Copyright (c) 2024 The emojicatalog authors
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>
'''
Unicode emoji reference data: names, groups, shortcodes,
emoji versions and skin tone variants, in CLDR order.
'''

from emojicatalog.catalog import UnicodeVersion
from emojicatalog.catalog import SkinTone
from emojicatalog.catalog import Group
from emojicatalog.catalog import EmojiRecord
from emojicatalog.catalog import Emoji
from emojicatalog.catalog import Catalog
from emojicatalog.catalog import load_catalog
from emojicatalog.catalog import default_catalog
from emojicatalog.catalog import lookup
from emojicatalog.catalog import get
from emojicatalog.catalog import get_by_shortcode
from emojicatalog.catalog import iter_emoji

__version__ = '1.0.0'

__all__ = [
    'UnicodeVersion',
    'SkinTone',
    'Group',
    'EmojiRecord',
    'Emoji',
    'Catalog',
    'load_catalog',
    'default_catalog',
    'lookup',
    'get',
    'get_by_shortcode',
    'iter_emoji',
]
