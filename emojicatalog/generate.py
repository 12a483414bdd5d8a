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
emojicatalog-generate

Generates the emoji catalog loaded by emojicatalog.catalog from
emoji-test.txt of the Unicode emoji data:

https://www.unicode.org/Public/emoji/15.1/emoji-test.txt

emoji-test.txt is in CLDR order and has the groups, subgroups,
names and emoji versions of all emoji, which is everything the
catalog needs. Shortcodes and skin tone tags are derived here.
'''

from typing import Any
from typing import Dict
from typing import List
from typing import Tuple
from typing import Iterable
from typing import NamedTuple
from typing import Optional
import sys
import os
import re
import json
import tempfile
import argparse
import logging

import httpx

from emojicatalog import util
from emojicatalog.catalog import Group
from emojicatalog.catalog import SkinTone
from emojicatalog.catalog import SKIN_TONE_MODIFIERS
from emojicatalog.catalog import family_key

LOGGER = logging.getLogger('emojicatalog')

DEFAULT_EMOJI_VERSION = '15.1'

EMOJI_TEST_URL = 'https://www.unicode.org/Public/emoji/{version}/emoji-test.txt'

# Not an emoji category, contains the bare skin tone and hair
# style components only.
COMPONENT_GROUP = 'Component'

SKIN_TONE_SHORTCODE_SUFFIXES = {
    SkinTone.LIGHT: 'light_skin_tone',
    SkinTone.MEDIUM_LIGHT: 'medium_light_skin_tone',
    SkinTone.MEDIUM: 'medium_skin_tone',
    SkinTone.MEDIUM_DARK: 'medium_dark_skin_tone',
    SkinTone.DARK: 'dark_skin_tone',
}

_VERSION_PATTERN = re.compile(r'# Version:\s*(?P<version>[0-9]+\.[0-9]+)')
_GROUP_PATTERN = re.compile(r'# group:(?P<group>.+)$')
_SUBGROUP_PATTERN = re.compile(r'# subgroup:(?P<subgroup>.+)$')
_NAME_PATTERN = re.compile(
    r'[^#]+#\s+\S+\s+E(?P<eversion>[0-9]+\.[0-9]+)\s+(?P<name>.+)$')

class EmojiTestEntry(NamedTuple):
    '''A fully-qualified emoji parsed from emoji-test.txt'''
    emoji: str
    name: str
    group: str
    subgroup: str
    unicode_version: str

def is_mixed_skin_tone(emoji_string: str) -> bool:
    '''Checks whether a sequence uses more than one skin tone

    Such sequences (e.g. two people with different skin tones)
    do not belong to a family of six and are not in the catalog.

    Examples:

    >>> is_mixed_skin_tone('🧑🏻\u200d🤝\u200d🧑🏿')
    True

    >>> is_mixed_skin_tone('🧑🏻\u200d🤝\u200d🧑🏻')
    False

    >>> is_mixed_skin_tone('🚀')
    False
    '''
    return len({character for character in emoji_string
                if character in SKIN_TONE_MODIFIERS}) > 1

def parse_emoji_test(
        lines: Iterable[str]) -> Tuple[str, List[EmojiTestEntry]]:
    '''Parses the lines of emoji-test.txt

    Only fully-qualified sequences are returned, the other ones are
    duplicates of them. The “Component” group and sequences mixing
    skin tones are skipped.

    :param lines: The lines of emoji-test.txt
    :return: The emoji version from the header and the entries
             in the order of the file

    Examples:

    >>> version, entries = parse_emoji_test([
    ...     '# Version: 15.1',
    ...     '# group: Travel & Places',
    ...     '# subgroup: transport-air',
    ...     '1F680 ; fully-qualified # 🚀 E0.6 rocket',
    ... ])
    >>> version
    '15.1'
    >>> entries[0].name, entries[0].group, entries[0].unicode_version
    ('rocket', 'Travel & Places', '0.6')
    '''
    emoji_version = ''
    group = ''
    subgroup = ''
    entries: List[EmojiTestEntry] = []
    for line in lines:
        line = line.rstrip('\n')
        match = _VERSION_PATTERN.match(line)
        if match:
            emoji_version = match.group('version')
            continue
        match = _GROUP_PATTERN.match(line)
        if match and match.group('group'):
            group = match.group('group').strip()
            continue
        match = _SUBGROUP_PATTERN.match(line)
        if match and match.group('subgroup'):
            subgroup = match.group('subgroup').strip()
            continue
        match = _NAME_PATTERN.match(line)
        line = re.sub(r'#.*$', '', line).strip()
        if not line:
            continue
        if not match:
            raise ValueError(f'Did not match "{line}" in emoji-test.txt')
        codepoints, property_string = (
            x.strip() for x in line.split(';')[:2])
        if property_string != 'fully-qualified':
            # The non-fully-qualified sequences are
            # all duplicates of the fully-qualified
            # sequences.
            continue
        if group == COMPONENT_GROUP:
            continue
        emoji_string = ''.join(
            chr(int(codepoint, 16)) for codepoint in codepoints.split())
        if is_mixed_skin_tone(emoji_string):
            LOGGER.debug('Skipping mixed skin tone sequence “%s”',
                         match.group('name').strip())
            continue
        entries.append(EmojiTestEntry(
            emoji=emoji_string,
            name=match.group('name').strip(),
            group=group,
            subgroup=subgroup,
            unicode_version=match.group('eversion')))
    return (emoji_version, entries)

def build_catalog_entries(
        entries: Iterable[EmojiTestEntry]) -> List[Dict[str, Any]]:
    '''Adds shortcodes and skin tones to the parsed entries

    An emoji without a skin tone modifier gets the shortcode derived
    from its name. A skin tone variant gets the shortcodes of the
    default member of its family with a skin tone suffix added.

    :return: The entries as written to the catalog file

    Examples:

    >>> built = build_catalog_entries([
    ...     EmojiTestEntry('👋', 'waving hand', 'People & Body',
    ...                    'hand-fingers-open', '0.6'),
    ...     EmojiTestEntry('👋🏻', 'waving hand: light skin tone',
    ...                    'People & Body', 'hand-fingers-open', '1.0')])
    >>> [(entry['shortcodes'], entry['skin_tone']) for entry in built]
    [(['waving_hand'], 'DEFAULT'), (['waving_hand_light_skin_tone'], 'LIGHT')]
    '''
    entries = list(entries)
    family_keys = {family_key(entry.emoji) for entry in entries
                   if SkinTone.from_sequence(entry.emoji)
                   is not SkinTone.DEFAULT}
    default_shortcodes: Dict[str, List[str]] = {}
    result: List[Dict[str, Any]] = []
    for entry in entries:
        key = family_key(entry.emoji)
        skin_tone: Optional[SkinTone] = SkinTone.from_sequence(entry.emoji)
        if skin_tone is SkinTone.DEFAULT:
            shortcodes = [util.shortcode_from_name(entry.name)]
            if key in family_keys:
                default_shortcodes[key] = shortcodes
            else:
                skin_tone = None
        else:
            if key not in default_shortcodes:
                raise ValueError(
                    f'skin tone variant “{entry.name}” comes before '
                    f'the default member of its family')
            suffix = SKIN_TONE_SHORTCODE_SUFFIXES[skin_tone]
            shortcodes = [f'{shortcode}_{suffix}'
                          for shortcode in default_shortcodes[key]]
        result.append({
            'emoji': entry.emoji,
            'name': entry.name,
            'group': entry.group,
            'subgroup': entry.subgroup,
            'unicode_version': entry.unicode_version,
            'shortcodes': shortcodes,
            'skin_tone': None if skin_tone is None else skin_tone.name,
        })
    return result

def validate_catalog_entries(entries: List[Dict[str, Any]]) -> None:
    '''Checks everything the catalog relies on without checking it itself

    :raises ValueError: describing the first problem found
    '''
    if not entries:
        raise ValueError('no emoji found')
    group_order = [group.value for group in Group]
    positions: Dict[str, int] = {}
    shortcodes: Dict[str, str] = {}
    families: Dict[str, List[int]] = {}
    last_group_index = 0
    for index, entry in enumerate(entries):
        emoji_string = entry['emoji']
        if emoji_string in positions:
            raise ValueError(f'duplicate emoji “{emoji_string}”')
        positions[emoji_string] = index
        for shortcode in entry['shortcodes']:
            if shortcode in shortcodes:
                raise ValueError(
                    f'duplicate shortcode “{shortcode}” for '
                    f'“{shortcodes[shortcode]}” and “{emoji_string}”')
            shortcodes[shortcode] = emoji_string
        if entry['group'] not in group_order:
            raise ValueError(f'unknown group “{entry["group"]}”')
        group_index = group_order.index(entry['group'])
        if group_index < last_group_index:
            raise ValueError(
                f'group “{entry["group"]}” of “{emoji_string}” '
                f'is out of order')
        last_group_index = group_index
        if entry['skin_tone'] is not None:
            families.setdefault(
                family_key(emoji_string), []).append(index)
    tone_names = [skin_tone.name for skin_tone in SkinTone]
    for indexes in families.values():
        members = [entries[index] for index in indexes]
        if [member['skin_tone'] for member in members] != tone_names:
            raise ValueError(
                f'skin tone family of “{members[0]["emoji"]}” has the '
                f'skin tones {[member["skin_tone"] for member in members]}')
        if indexes != list(range(indexes[0], indexes[0] + len(indexes))):
            raise ValueError(
                f'skin tone family of “{members[0]["emoji"]}” '
                f'is not contiguous')
        if len({member['group'] for member in members}) != 1:
            raise ValueError(
                f'skin tone family of “{members[0]["emoji"]}” '
                f'spans several groups')
    LOGGER.info('Validated %d emoji with %d skin tone families',
                len(entries), len(families))

def download_emoji_test(
        url: str,
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None) -> List[str]:
    '''Downloads emoji-test.txt

    :param url: The URL of emoji-test.txt
    :param timeout: Timeout in seconds for the request
    :param transport: Only used for testing
    :return: The lines of the file
    :raises httpx.HTTPError: if the download fails
    '''
    LOGGER.info('Downloading %s', url)
    with httpx.Client(timeout=timeout,
                      follow_redirects=True,
                      transport=transport) as client:
        response = client.get(url)
        response.raise_for_status()
    return response.text.splitlines()

def read_emoji_test(path: str) -> List[str]:
    '''Reads a local emoji-test.txt, possibly gzip compressed'''
    LOGGER.info('Reading %s', path)
    open_function = util.open_function_for_path(path)
    with open_function(path, mode='rt', encoding='utf-8') as emoji_test_file:
        return emoji_test_file.readlines()

def write_catalog(
        path: str,
        emoji_version: str,
        entries: List[Dict[str, Any]]) -> None:
    '''Writes the catalog file, gzip compressed if “path” ends in “.gz”

    One emoji per line, which keeps diffs between emoji
    versions readable.
    '''
    dirname = os.path.dirname(path)
    if dirname:
        os.makedirs(dirname, exist_ok=True)
    # Written next to the final file and renamed into place, so a
    # failed write never leaves a truncated catalog in the search path.
    (temp_fd, temp_path) = tempfile.mkstemp(
        dir=dirname or os.curdir,
        prefix=f'.{os.path.basename(path)}.',
        suffix='.tmp')
    os.close(temp_fd)
    open_function = util.open_function_for_path(path)
    try:
        with open_function(
                temp_path, mode='wt', encoding='utf-8') as catalog_file:
            catalog_file.write(
                f'{{"emoji_version": {json.dumps(emoji_version)}, '
                f'"emojis": [\n')
            catalog_file.write(',\n'.join(
                json.dumps(entry, ensure_ascii=False) for entry in entries))
            catalog_file.write('\n]}\n')
        os.replace(temp_path, path)
    except BaseException:
        os.remove(temp_path)
        raise
    LOGGER.info('Wrote %d emoji to %s', len(entries), path)

def parse_args(argv: Optional[List[str]] = None) -> Any:
    '''
    Parse the command line arguments.
    '''
    parser = argparse.ArgumentParser(
        description='Generate the emoji catalog from emoji-test.txt')
    parser.add_argument(
        '-i', '--input',
        dest='input',
        type=str,
        action='store',
        default='',
        help=('Local emoji-test.txt (or emoji-test.txt.gz) to use '
              'instead of downloading it. '
              'default: "%(default)s"'))
    parser.add_argument(
        '-e', '--emoji-version',
        dest='emoji_version',
        type=str,
        action='store',
        default=DEFAULT_EMOJI_VERSION,
        help=('Emoji version to download. '
              'default: "%(default)s"'))
    parser.add_argument(
        '-u', '--url',
        dest='url',
        type=str,
        action='store',
        default='',
        help=('URL to download emoji-test.txt from, overrides '
              '--emoji-version. '
              f'default: "{EMOJI_TEST_URL}"'))
    parser.add_argument(
        '-o', '--output',
        dest='output',
        type=str,
        action='store',
        default='',
        help=('File to write the catalog to, compressed if it ends '
              'in “.gz”. default: '
              '"~/.local/share/emojicatalog/data/emoji-catalog.json.gz"'))
    parser.add_argument(
        '-t', '--timeout',
        dest='timeout',
        type=float,
        action='store',
        default=60.0,
        help=('Timeout in seconds for the download. '
              'default: %(default)s'))
    parser.add_argument(
        '-d', '--debug',
        dest='debug',
        action='store_true',
        default=False,
        help=('Print some debug output to stderr. '
              'default: %(default)s'))
    return parser.parse_args(argv)

def main(argv: Optional[List[str]] = None) -> int:
    '''Generates the catalog, returns the exit status'''
    args = parse_args(argv)
    log_handler = logging.StreamHandler(stream=sys.stderr)
    old_level = LOGGER.level
    LOGGER.setLevel(logging.DEBUG if args.debug else logging.INFO)
    LOGGER.addHandler(log_handler)
    try:
        if args.input:
            lines = read_emoji_test(args.input)
        else:
            url = args.url or EMOJI_TEST_URL.format(
                version=args.emoji_version)
            lines = download_emoji_test(url, timeout=args.timeout)
        emoji_version, parsed = parse_emoji_test(lines)
        entries = build_catalog_entries(parsed)
        validate_catalog_entries(entries)
        output = args.output or os.path.join(
            util.xdg_save_data_path(*util.USER_DATADIR_RESOURCE),
            util.CATALOG_BASENAME + '.gz')
        write_catalog(output, emoji_version, entries)
    except (httpx.HTTPError, OSError, ValueError) as error:
        LOGGER.error('Generating the emoji catalog failed: %s', error)
        return 1
    finally:
        LOGGER.removeHandler(log_handler)
        LOGGER.setLevel(old_level)
    return 0

if __name__ == '__main__':
    sys.exit(main())
