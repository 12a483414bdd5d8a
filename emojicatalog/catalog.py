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

'''The emoji catalog and the queries on it.

The catalog is the complete list of emoji in CLDR order as produced
by “emojicatalog-generate”. It is loaded once and never changed
afterwards, so it can be shared by any number of threads without
locking.

Examples:

>>> lookup('🚀').shortcode()
'rocket'

>>> lookup('ʕっ•ᴥ•ʔっ') is None
True

>>> next(iter_emoji()).as_str()
'😀'
'''

from typing import Any
from typing import Dict
from typing import List
from typing import Tuple
from typing import Iterable
from typing import Iterator
from typing import NamedTuple
from typing import Optional
from enum import Enum
import sys
import json
import functools
import threading
import logging

from emojicatalog import util

LOGGER = logging.getLogger('emojicatalog')

EMOJI_PRESENTATION_SELECTOR = '\ufe0f'

SKIN_TONE_MODIFIERS = ('🏻', '🏼', '🏽', '🏾', '🏿')

class UnicodeVersion(NamedTuple):
    '''The version of the emoji standard which introduced an emoji

    Compares like a tuple, i.e. the major version first, then
    the minor version.

    Examples:

    >>> UnicodeVersion(13, 0) >= UnicodeVersion(12, 0)
    True

    >>> UnicodeVersion(12, 0) < UnicodeVersion(12, 1)
    True

    >>> str(UnicodeVersion(0, 6))
    '0.6'
    '''
    major: int
    minor: int

    def __str__(self) -> str:
        return f'{self.major}.{self.minor}'

    @classmethod
    def from_string(cls, version: str) -> 'UnicodeVersion':
        '''Parses a version string like “15.1”

        :param version: The version as “major.minor”
        :raises ValueError: if the string is not of that form

        Examples:

        >>> UnicodeVersion.from_string('15.1')
        UnicodeVersion(major=15, minor=1)

        >>> UnicodeVersion.from_string('fifteen')
        Traceback (most recent call last):
        ...
        ValueError: invalid version string: 'fifteen'
        '''
        major, dot, minor = version.partition('.')
        if not dot or not major.isdigit() or not minor.isdigit():
            raise ValueError(f'invalid version string: {version!r}')
        return cls(int(major), int(minor))

class SkinTone(Enum):
    '''The skin tones, in the order used for skin tone families

    The value is the skin tone modifier character, which is the
    empty string for the default (unmodified) skin tone.
    '''
    DEFAULT = ''
    LIGHT = '🏻'
    MEDIUM_LIGHT = '🏼'
    MEDIUM = '🏽'
    MEDIUM_DARK = '🏾'
    DARK = '🏿'

    @classmethod
    def from_sequence(cls, sequence: str) -> 'SkinTone':
        '''Returns the skin tone of the first modifier in a sequence

        Returns SkinTone.DEFAULT if the sequence contains no modifier.

        Examples:

        >>> SkinTone.from_sequence('👋🏽')
        <SkinTone.MEDIUM: '🏽'>

        >>> SkinTone.from_sequence('👋')
        <SkinTone.DEFAULT: ''>
        '''
        for character in sequence:
            if character in SKIN_TONE_MODIFIERS:
                return cls(character)
        return cls.DEFAULT

class Group(Enum):
    '''The top level emoji categories in CLDR order'''
    SMILEYS_AND_EMOTION = 'Smileys & Emotion'
    PEOPLE_AND_BODY = 'People & Body'
    ANIMALS_AND_NATURE = 'Animals & Nature'
    FOOD_AND_DRINK = 'Food & Drink'
    TRAVEL_AND_PLACES = 'Travel & Places'
    ACTIVITIES = 'Activities'
    OBJECTS = 'Objects'
    SYMBOLS = 'Symbols'
    FLAGS = 'Flags'

    @classmethod
    def iter(cls) -> Iterator['Group']:
        '''Returns an iterator over all groups in CLDR order

        Examples:

        >>> [group.value for group in Group.iter()][:2]
        ['Smileys & Emotion', 'People & Body']
        '''
        return iter(cls)

    def emojis(self, catalog: Optional['Catalog'] = None) -> Iterator['Emoji']:
        '''Returns an iterator over the emoji in this group

        Skin tone variants other than the default are not included,
        use Emoji.skin_tones() to get them.

        :param catalog: The catalog to use, the default catalog if None

        Examples:

        >>> next(Group.FLAGS.emojis()).name()
        'chequered flag'
        '''
        if catalog is None:
            catalog = default_catalog()
        return catalog.group_emojis(self)

    def subgroups(self, catalog: Optional['Catalog'] = None) -> List[str]:
        '''Returns the subgroups of this group in CLDR order

        :param catalog: The catalog to use, the default catalog if None

        Examples:

        >>> Group.SMILEYS_AND_EMOTION.subgroups()[:3]
        ['face-smiling', 'face-affection', 'face-tongue']
        '''
        if catalog is None:
            catalog = default_catalog()
        return catalog.subgroups(self)

class EmojiRecord(NamedTuple):
    '''One entry of the generated table

    emoji: str                The exact sequence of code points
    name: str                 The CLDR short name
    group: Group              The top level category
    subgroup: str             The CLDR subgroup, e.g. “face-smiling”
    unicode_version: UnicodeVersion
                              The emoji version which introduced it
    shortcodes: Tuple[str, ...]
                              Shortcodes without colons, may be empty
    skin_tone: Optional[SkinTone]
                              None if the emoji has no skin tones at all
    '''
    emoji: str
    name: str
    group: Group
    subgroup: str
    unicode_version: UnicodeVersion
    shortcodes: Tuple[str, ...]
    skin_tone: Optional[SkinTone]

def family_key(sequence: str) -> str:
    '''Returns the key shared by all members of a skin tone family

    Skin tone modifiers and emoji presentation selectors are removed,
    what is left is the same for all six members of a family.

    Examples:

    >>> family_key('🧔🏻\u200d♂\ufe0f') == family_key('🧔\u200d♂\ufe0f')
    True

    >>> family_key('☝🏿') == family_key('☝\ufe0f')
    True
    '''
    return ''.join(
        character for character in sequence
        if character not in SKIN_TONE_MODIFIERS
        and character != EMOJI_PRESENTATION_SELECTOR)

def toggle_emoji_presentation(text: str) -> str:
    '''Adds or removes a trailing emoji presentation selector

    This is the only variation selector difference ignored when
    looking up emoji, selectors in other positions are significant.

    Examples:

    >>> toggle_emoji_presentation('☹') == '☹\ufe0f'
    True

    >>> toggle_emoji_presentation('☹\ufe0f')
    '☹'

    >>> toggle_emoji_presentation('#\ufe0f⃣') == '#\ufe0f⃣\ufe0f'
    True
    '''
    if text.endswith(EMOJI_PRESENTATION_SELECTOR):
        return text[:-1]
    return text + EMOJI_PRESENTATION_SELECTOR

@functools.total_ordering
class Emoji:
    '''An emoji in a catalog

    Emoji objects are created by the catalog only, each one refers
    to a position in its catalog. Two emoji are equal if their
    sequences are equal, an emoji is also equal to a plain string
    with the same sequence. Emoji are ordered by their position in
    the catalog, which is CLDR order, never by code points.

    Examples:

    >>> lookup('😀') < lookup('😉')
    True

    >>> lookup('😀') == '😀'
    True

    >>> str(lookup('😀'))
    '😀'
    '''
    __slots__ = ('_catalog', '_index')

    def __init__(self, catalog: 'Catalog', index: int) -> None:
        if not 0 <= index < len(catalog):
            raise IndexError(
                f'index {index} out of range for catalog of '
                f'{len(catalog)} emoji')
        self._catalog = catalog
        self._index = index

    @property
    def _record(self) -> EmojiRecord:
        return self._catalog.record(self._index)

    def as_str(self) -> str:
        '''Returns the sequence of code points of this emoji'''
        return self._record.emoji

    def name(self) -> str:
        '''Returns the CLDR short name

        Examples:

        >>> lookup('👋🏽').name()
        'waving hand: medium skin tone'
        '''
        return self._record.name

    def group(self) -> Group:
        '''Returns the group this emoji belongs to

        Examples:

        >>> lookup('🚀').group()
        <Group.TRAVEL_AND_PLACES: 'Travel & Places'>
        '''
        return self._record.group

    def subgroup(self) -> str:
        '''Returns the CLDR subgroup this emoji belongs to'''
        return self._record.subgroup

    def unicode_version(self) -> UnicodeVersion:
        '''Returns the emoji version which introduced this emoji

        Examples:

        >>> lookup('🥲').unicode_version()
        UnicodeVersion(major=13, minor=0)
        '''
        return self._record.unicode_version

    def shortcode(self) -> Optional[str]:
        '''Returns the first shortcode or None if there is none'''
        return next(self.shortcodes(), None)

    def shortcodes(self) -> Iterator[str]:
        '''Returns an iterator over all shortcodes

        Examples:

        >>> list(lookup('👋🏿').shortcodes())
        ['waving_hand_dark_skin_tone']
        '''
        return iter(self._record.shortcodes)

    def skin_tone(self) -> Optional[SkinTone]:
        '''Returns the skin tone or None if there are no skin tones

        Examples:

        >>> lookup('👍').skin_tone()
        <SkinTone.DEFAULT: ''>

        >>> lookup('🚀').skin_tone() is None
        True
        '''
        return self._record.skin_tone

    def skin_tones(self) -> Optional[Iterator['Emoji']]:
        '''Returns an iterator over all skin tone variants

        The variants come in SkinTone order, starting with the
        default. Returns None if this emoji has no skin tones.

        Examples:

        >>> ''.join(str(emoji) for emoji in lookup('👋').skin_tones())
        '👋👋🏻👋🏼👋🏽👋🏾👋🏿'
        '''
        return self._catalog.skin_tones(self._index)

    def with_skin_tone(self, skin_tone: SkinTone) -> Optional['Emoji']:
        '''Returns the variant of this emoji with the given skin tone

        Returns None if this emoji has no skin tones.

        :param skin_tone: The skin tone wanted

        Examples:

        >>> lookup('👋🏿').with_skin_tone(SkinTone.DEFAULT).as_str()
        '👋'

        >>> lookup('🚀').with_skin_tone(SkinTone.DARK) is None
        True
        '''
        return self._catalog.with_skin_tone(self._index, skin_tone)

    def __str__(self) -> str:
        return self.as_str()

    def __repr__(self) -> str:
        return f'Emoji({self.as_str()!r})'

    def __hash__(self) -> int:
        return hash(self.as_str())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Emoji):
            return self.as_str() == other.as_str()
        if isinstance(other, str):
            return self.as_str() == other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        # Positions of different catalogs cannot be compared.
        if not isinstance(other, Emoji) or other._catalog is not self._catalog:
            return NotImplemented
        return self._index < other._index

class Catalog:
    '''The immutable, ordered table of all emoji

    All indexes needed by the queries are built once here, after
    that nothing is ever changed.

    :param records: The generated records in CLDR order
    :param emoji_version: The version of the emoji data, e.g. “15.1”
    '''
    def __init__(
            self,
            records: Iterable[EmojiRecord],
            emoji_version: str = '') -> None:
        self._records: Tuple[EmojiRecord, ...] = tuple(records)
        self._emoji_version = emoji_version
        self._positions: Dict[str, int] = {}
        self._shortcode_positions: Dict[str, int] = {}
        self._families: Dict[str, Tuple[int, ...]] = {}
        self._family_keys: Dict[int, str] = {}
        families: Dict[str, List[int]] = {}
        subgroups: Dict[Group, List[str]] = {group: [] for group in Group}
        representatives: List[int] = []
        for index, record in enumerate(self._records):
            self._positions[record.emoji] = index
            for shortcode in record.shortcodes:
                self._shortcode_positions.setdefault(shortcode, index)
            if record.subgroup not in subgroups[record.group]:
                subgroups[record.group].append(record.subgroup)
            if record.skin_tone in (None, SkinTone.DEFAULT):
                representatives.append(index)
            if record.skin_tone is not None:
                key = family_key(record.emoji)
                self._family_keys[index] = key
                families.setdefault(key, []).append(index)
        tone_order = list(SkinTone)
        for key, indexes in families.items():
            self._families[key] = tuple(sorted(
                indexes,
                key=lambda i: tone_order.index(self._records[i].skin_tone)))
        self._subgroups = {
            group: tuple(names) for group, names in subgroups.items()}
        self._emoji: Tuple[Emoji, ...] = tuple(
            Emoji(self, index) for index in range(len(self._records)))
        self._representatives = tuple(representatives)
        self._group_representatives: Dict[Group, Tuple[int, ...]] = {
            group: tuple(index for index in representatives
                         if self._records[index].group is group)
            for group in Group}
        LOGGER.debug(
            'Catalog with %d records, %d skin tone families, '
            '%d representatives',
            len(self._records), len(self._families), len(representatives))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, text: object) -> bool:
        return isinstance(text, str) and self.lookup(text) is not None

    @property
    def emoji_version(self) -> str:
        '''The version of the emoji data this catalog was generated from'''
        return self._emoji_version

    def record(self, index: int) -> EmojiRecord:
        '''Returns the generated record at a position'''
        return self._records[index]

    def position(self, sequence: str) -> int:
        '''Returns the position of an exact sequence in the catalog

        :raises KeyError: if the sequence is not in the catalog
        '''
        return self._positions[sequence]

    def lookup(self, text: str) -> Optional[Emoji]:
        '''Looks up an emoji by its sequence

        A trailing emoji presentation selector (U+FE0F) is not
        significant: if the exact text is not in the catalog, the
        text with that selector added or removed is tried.

        :param text: The emoji sequence to look up
        :return: The emoji or None if it is not in the catalog
        '''
        index = self._positions.get(text)
        if index is None and text:
            index = self._positions.get(toggle_emoji_presentation(text))
        if index is None:
            return None
        return self._emoji[index]

    get = lookup

    def get_by_shortcode(self, shortcode: str) -> Optional[Emoji]:
        '''Looks up an emoji by shortcode, with or without colons

        :param shortcode: A shortcode like “rocket” or “:rocket:”
        :return: The emoji or None if no emoji has this shortcode
        '''
        if len(shortcode) > 2 and shortcode[0] == shortcode[-1] == ':':
            shortcode = shortcode[1:-1]
        index = self._shortcode_positions.get(shortcode)
        if index is None:
            return None
        return self._emoji[index]

    def iter_emoji(self) -> Iterator[Emoji]:
        '''Returns an iterator over all emoji in CLDR order

        Only the default variant of an emoji with skin tones is
        included.
        '''
        return (self._emoji[index] for index in self._representatives)

    def group_emojis(self, group: Group) -> Iterator[Emoji]:
        '''Returns an iterator over the emoji of a group in CLDR order'''
        return (self._emoji[index]
                for index in self._group_representatives[group])

    def subgroups(self, group: Group) -> List[str]:
        '''Returns the subgroups of a group in CLDR order'''
        return list(self._subgroups[group])

    def skin_tones(self, index: int) -> Optional[Iterator[Emoji]]:
        '''Returns the skin tone family of the emoji at a position

        Returns None if the emoji at this position has no skin tones.
        '''
        key = self._family_keys.get(index)
        if key is None:
            return None
        return (self._emoji[i] for i in self._families[key])

    def with_skin_tone(
            self, index: int, skin_tone: SkinTone) -> Optional[Emoji]:
        '''Returns the family member of the emoji at a position
        which has the given skin tone

        Returns None if the emoji at this position has no skin tones.
        '''
        key = self._family_keys.get(index)
        if key is None:
            return None
        for i in self._families[key]:
            if self._records[i].skin_tone is skin_tone:
                return self._emoji[i]
        return None

def record_from_json(data: Dict[str, Any]) -> EmojiRecord:
    '''Converts one entry of a generated catalog file to a record

    :raises ValueError: if the entry is malformed

    Examples:

    >>> record_from_json({
    ...     'emoji': '🚀', 'name': 'rocket', 'group': 'Travel & Places',
    ...     'subgroup': 'transport-air', 'unicode_version': '0.6',
    ...     'shortcodes': ['rocket'], 'skin_tone': None}).group
    <Group.TRAVEL_AND_PLACES: 'Travel & Places'>
    '''
    try:
        skin_tone = data['skin_tone']
        return EmojiRecord(
            emoji=data['emoji'],
            name=data['name'],
            group=Group(data['group']),
            subgroup=data['subgroup'],
            unicode_version=UnicodeVersion.from_string(
                data['unicode_version']),
            shortcodes=tuple(data['shortcodes']),
            skin_tone=None if skin_tone is None else SkinTone[skin_tone])
    except (KeyError, TypeError, AttributeError) as error:
        raise ValueError(
            f'malformed catalog entry {data!r}: {error!r}') from error

def load_catalog(path: str = '') -> Catalog:
    '''Loads a catalog file written by “emojicatalog-generate”

    :param path: The file to load. If empty, the file is searched
                 as described in util.find_catalog_path().
    :raises FileNotFoundError: if no catalog file can be found
    :raises ValueError: if the file is not a valid catalog
    '''
    if not path:
        path = util.find_catalog_path()
    if not path:
        raise FileNotFoundError(
            f'no {util.CATALOG_BASENAME} found in '
            f'{util.catalog_dirnames()}')
    open_function = util.open_function_for_path(path)
    with open_function(path, mode='rt', encoding='utf-8') as catalog_file:
        try:
            data = json.load(catalog_file)
        except json.JSONDecodeError as error:
            raise ValueError(f'{path} is not valid JSON: {error}') from error
    if not isinstance(data, dict) or not isinstance(data.get('emojis'), list):
        raise ValueError(f'{path} contains no list of emojis')
    records = [record_from_json(entry) for entry in data['emojis']]
    catalog = Catalog(records, emoji_version=data.get('emoji_version', ''))
    LOGGER.info('Loaded %d emoji (emoji version %s) from %s',
                len(catalog), catalog.emoji_version, path)
    return catalog

_DEFAULT_CATALOG: Optional[Catalog] = None
_DEFAULT_CATALOG_LOCK = threading.Lock()

def default_catalog() -> Catalog:
    '''Returns the shared catalog, loading it on first use'''
    global _DEFAULT_CATALOG # pylint: disable=global-statement
    if _DEFAULT_CATALOG is None:
        with _DEFAULT_CATALOG_LOCK:
            if _DEFAULT_CATALOG is None:
                _DEFAULT_CATALOG = load_catalog()
    return _DEFAULT_CATALOG

def lookup(text: str) -> Optional[Emoji]:
    '''Looks up an emoji by its sequence in the default catalog

    Examples:

    >>> lookup('☹') == lookup('☹\ufe0f')
    True

    >>> lookup('') is None
    True
    '''
    return default_catalog().lookup(text)

get = lookup

def get_by_shortcode(shortcode: str) -> Optional[Emoji]:
    '''Looks up an emoji by shortcode in the default catalog

    Examples:

    >>> get_by_shortcode(':rocket:').as_str()
    '🚀'

    >>> get_by_shortcode('no_such_shortcode') is None
    True
    '''
    return default_catalog().get_by_shortcode(shortcode)

def iter_emoji() -> Iterator[Emoji]:
    '''Returns an iterator over the default catalog in CLDR order'''
    return default_catalog().iter_emoji()

def main() -> None:
    '''
    Used for testing.

    “python3 -m emojicatalog.catalog”

    runs the doctests of this module.
    '''
    log_handler = logging.StreamHandler(stream=sys.stderr)
    LOGGER.setLevel(logging.DEBUG)
    LOGGER.addHandler(log_handler)

    import doctest # pylint: disable=import-outside-toplevel
    flags = doctest.REPORT_NDIFF
    (failed, _attempted) = doctest.testmod(optionflags=flags)
    sys.exit(failed)

if __name__ == "__main__":
    main()
