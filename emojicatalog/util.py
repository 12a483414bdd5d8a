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
Utility functions used by emojicatalog
'''

from typing import Any
from typing import Tuple
from typing import Optional
from typing import Iterable
from typing import Callable
import os
import re
import gzip
import functools
import unicodedata
import logging

LOGGER = logging.getLogger('emojicatalog')

NORMALIZATION_FORM_INTERNAL = 'NFD'

# Environment variable which may contain the full path of a
# generated catalog file. If set, no other location is searched.
CATALOG_PATH_ENVIRONMENT_VARIABLE = 'EMOJICATALOG_DATA'

CATALOG_BASENAME = 'emoji-catalog.json'

DATADIR = os.path.join(os.path.dirname(__file__), 'data')

# Letters which have no decomposition but should be transliterated
# anyway when removing accents.
TRANS_TABLE = {
    ord('ẞ'): 'SS',
    ord('ß'): 'ss',
    ord('Ø'): 'O',
    ord('ø'): 'o',
    ord('Æ'): 'AE',
    ord('æ'): 'ae',
    ord('Œ'): 'OE',
    ord('œ'): 'oe',
    ord('Ł'): 'L',
    ord('ł'): 'l',
    ord('Þ'): 'TH',
    ord('Ħ'): 'H',
    ord('Ŋ'): 'N',
    ord('Ŧ'): 'T',
}

# Characters in CLDR names which would otherwise vanish when
# building a shortcode (“keycap: #”, “keycap: *”).
SHORTCODE_TRANS_TABLE = {
    ord('#'): 'hash',
    ord('*'): 'asterisk',
}

@functools.lru_cache(maxsize=None)
def remove_accents(text: str) -> str:
    '''Removes accents from the text

    :param text: The text to change
    :return: The text with all accents removed
             in NORMALIZATION_FORM_INTERNAL

    Examples:

    >>> remove_accents('Ångstrøm')
    'Angstrom'

    >>> remove_accents('Côte d’Ivoire')
    'Cote d’Ivoire'

    >>> remove_accents('São Tomé & Príncipe')
    'Sao Tome & Principe'
    '''
    result = ''.join([
        x for x in unicodedata.normalize('NFKD', text)
        if unicodedata.category(x) != 'Mn']).translate(TRANS_TABLE)
    return unicodedata.normalize(NORMALIZATION_FORM_INTERNAL, result)

def shortcode_from_name(name: str) -> str:
    '''Derives a shortcode from the CLDR short name of an emoji

    The name is stripped of accents and lower cased, “#” and “*”
    are spelled out and every run of other characters which are
    not ASCII letters or digits becomes a single underscore.

    :param name: A CLDR short name like “flag: Côte d’Ivoire”
    :return: The shortcode without the surrounding colons

    Examples:

    >>> shortcode_from_name('rocket')
    'rocket'

    >>> shortcode_from_name('flag: Côte d’Ivoire')
    'flag_cote_d_ivoire'

    >>> shortcode_from_name('keycap: #')
    'keycap_hash'

    >>> shortcode_from_name('A button (blood type)')
    'a_button_blood_type'

    >>> shortcode_from_name('Japanese “here” button')
    'japanese_here_button'
    '''
    text = remove_accents(name).lower().translate(SHORTCODE_TRANS_TABLE)
    return re.sub(r'[^a-z0-9]+', '_', text).strip('_')

def xdg_data_path(*resource: str) -> str:
    '''Returns the path of a resource below $XDG_DATA_HOME

    In contrast to xdg_save_data_path() the directory is not
    created, this is used when only looking for files.
    '''
    xdg_data_home = os.environ.get('XDG_DATA_HOME') or os.path.join(
        os.path.expanduser('~'), '.local', 'share')
    resource_joined = os.path.join(*resource)
    assert not resource_joined.startswith('/')
    return os.path.join(xdg_data_home, resource_joined)

def xdg_save_data_path(*resource: str) -> str:
    '''Returns the path of a resource below $XDG_DATA_HOME

    Creates the directory if it does not exist yet.
    '''
    path = xdg_data_path(*resource)
    if not os.path.isdir(path):
        os.makedirs(path, exist_ok=True)
    return path

# USER_DATADIR will be “~/.local/share/emojicatalog/data” by default
USER_DATADIR_RESOURCE = ('emojicatalog', 'data')

def catalog_dirnames() -> Tuple[str, ...]:
    '''Returns the directories searched for a generated catalog

    The user data directory comes first so that a catalog
    regenerated by “emojicatalog-generate” wins over the catalog
    shipped with the package.
    '''
    return (xdg_data_path(*USER_DATADIR_RESOURCE), DATADIR)

def find_path_and_open_function(
        dirnames: Iterable[str],
        basenames: Iterable[str],
        subdir: str = '') -> Tuple[str, Optional[Callable[..., Any]]]:
    '''Find the first existing file of a list of basenames and dirnames

    For each file in “basenames”, tries whether that file or the
    file with “.gz” added can be found in the list of directories
    “dirnames” where “subdir” is added to each directory in the list.

    Returns a tuple (path, open_function) where “path” is the
    complete path of the first file found and the open function
    is either “open()” or “gzip.open()”.

    :param dirnames: A list of directories to search in
    :param basenames: A list of file names to search for
    :param subdir: A subdirectory to be added to each directory in the list

    Examples:

    >>> find_path_and_open_function(['/nonexistent'], ['nothing.json'])
    ('', None)
    '''
    for basename in basenames:
        for dirname in dirnames:
            path = os.path.join(dirname, subdir, basename)
            if os.path.exists(path):
                return (path, open_function_for_path(path))
            path = os.path.join(dirname, subdir, basename + '.gz')
            if os.path.exists(path):
                return (path, gzip.open)
    return ('', None)

def open_function_for_path(path: str) -> Callable[..., Any]:
    '''Returns gzip.open() for “.gz” files and open() otherwise

    Examples:

    >>> open_function_for_path('emoji-test.txt.gz') is gzip.open
    True

    >>> open_function_for_path('emoji-test.txt') is open
    True
    '''
    if path.endswith('.gz'):
        return gzip.open
    return open

def find_catalog_path() -> str:
    '''Finds the generated catalog file to load

    Returns the path from the environment variable
    “EMOJICATALOG_DATA” if it is set, otherwise the first
    “emoji-catalog.json” or “emoji-catalog.json.gz” found in
    catalog_dirnames(). Returns an empty string if nothing
    is found.
    '''
    path = os.environ.get(CATALOG_PATH_ENVIRONMENT_VARIABLE, '')
    if path:
        LOGGER.debug('Using %s=%s', CATALOG_PATH_ENVIRONMENT_VARIABLE, path)
        return os.path.expanduser(path)
    dirnames = catalog_dirnames()
    (path, dummy_open_function) = find_path_and_open_function(
        dirnames, (CATALOG_BASENAME,))
    if not path:
        LOGGER.warning(
            'could not find "%s" in "%s"', CATALOG_BASENAME, dirnames)
    return path
