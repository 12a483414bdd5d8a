#!/usr/bin/python3

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
This file implements test cases for looking up, ordering and
iterating over the emoji in the catalog.
'''

import sys
import os
import logging
import threading
import unittest
from unittest import mock

LOGGER = logging.getLogger('emojicatalog')

# pylint: disable=wrong-import-position
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from emojicatalog import catalog # pylint: disable=import-error
sys.path.pop(0)
# pylint: enable=wrong-import-position

# pylint: disable=missing-function-docstring
# pylint: disable=missing-class-docstring
# pylint: disable=invalid-name
# pylint: disable=protected-access

def small_catalog() -> catalog.Catalog:
    version = catalog.UnicodeVersion(0, 6)
    return catalog.Catalog([
        catalog.EmojiRecord(
            '😀', 'grinning face', catalog.Group.SMILEYS_AND_EMOTION,
            'face-smiling', catalog.UnicodeVersion(1, 0),
            ('grinning_face',), None),
        catalog.EmojiRecord(
            '🚀', 'rocket', catalog.Group.TRAVEL_AND_PLACES,
            'transport-air', version, ('rocket', 'space_rocket'), None),
        catalog.EmojiRecord(
            '🔣', 'input symbols', catalog.Group.SYMBOLS,
            'alphanum', version, (), None),
    ], emoji_version='15.1')

class CatalogTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.maxDiff = None
        self.catalog = catalog.default_catalog()

    def tearDown(self) -> None:
        pass

    def test_dummy(self) -> None:
        self.assertEqual(True, True)

    def test_catalog_size(self) -> None:
        self.assertEqual(self.catalog.emoji_version, '15.1')
        # Including the skin tone variants:
        self.assertEqual(len(self.catalog), 3513)
        # Only the default of each skin tone family:
        self.assertEqual(len(list(catalog.iter_emoji())), 1898)

    def test_lookup(self) -> None:
        emoji = catalog.lookup('😉')
        self.assertIsNotNone(emoji)
        self.assertEqual(emoji.as_str(), '😉')
        self.assertEqual(emoji.name(), 'winking face')
        self.assertEqual(emoji.group(), catalog.Group.SMILEYS_AND_EMOTION)
        self.assertEqual(emoji.subgroup(), 'face-smiling')
        self.assertEqual(emoji.unicode_version(), catalog.UnicodeVersion(0, 6))
        self.assertEqual(emoji.shortcode(), 'winking_face')
        self.assertIsNone(emoji.skin_tone())

    def test_lookup_not_found(self) -> None:
        self.assertIsNone(catalog.lookup(''))
        self.assertIsNone(catalog.lookup('a'))
        self.assertIsNone(catalog.lookup('😀😀'))
        self.assertIsNone(catalog.lookup('\ufe0f'))
        self.assertNotIn('a', self.catalog)
        self.assertNotIn(42, self.catalog)

    def test_get_is_lookup(self) -> None:
        self.assertIs(catalog.get('🚀'), catalog.lookup('🚀'))

    def test_lookup_returns_same_object(self) -> None:
        self.assertIs(catalog.lookup('🚀'), catalog.lookup('🚀'))

    def test_trailing_emoji_presentation_selector(self) -> None:
        # “frowning face” is fully qualified with U+FE0F
        without_selector = catalog.lookup('☹')
        with_selector = catalog.lookup('☹\ufe0f')
        self.assertIsNotNone(without_selector)
        self.assertEqual(without_selector, with_selector)
        self.assertEqual(without_selector.as_str(), '☹\ufe0f')
        # “rocket” is fully qualified without U+FE0F
        self.assertEqual(catalog.lookup('🚀\ufe0f'), catalog.lookup('🚀'))
        self.assertEqual(catalog.lookup('❤'), '❤\ufe0f')
        self.assertIn('☹', self.catalog)

    def test_inner_emoji_presentation_selector_is_significant(self) -> None:
        # The fully qualified keycap has U+FE0F before U+20E3,
        # only a trailing selector is ignored.
        self.assertEqual(catalog.lookup('#\ufe0f⃣').shortcode(),
                         'keycap_hash')
        self.assertIsNone(catalog.lookup('#⃣'))
        self.assertIsNone(catalog.lookup('#⃣\ufe0f'))

    def test_ordering_follows_catalog(self) -> None:
        grinning = catalog.lookup('😀')
        winking = catalog.lookup('😉')
        rocket = catalog.lookup('🚀')
        self.assertLess(grinning, winking)
        self.assertLess(winking, rocket)
        self.assertGreater(rocket, grinning)
        self.assertLessEqual(grinning, grinning)
        self.assertGreaterEqual(rocket, rocket)
        self.assertFalse(grinning < grinning)
        # CLDR order, not code point order: U+1F680 < U+1FAE8
        self.assertLess(catalog.lookup('🫨'), rocket)

    def test_ordering_is_consistent_with_positions(self) -> None:
        emojis = list(catalog.iter_emoji())
        self.assertEqual(sorted(reversed(emojis)), emojis)
        for first, second in zip(emojis, emojis[1:]):
            self.assertLess(first, second)
            self.assertLess(self.catalog.position(first.as_str()),
                            self.catalog.position(second.as_str()))

    def test_ordering_includes_skin_tone_variants(self) -> None:
        emojis = [catalog.Emoji(self.catalog, index)
                  for index in range(len(self.catalog))]
        self.assertEqual(len(emojis), 3513)
        self.assertEqual(sorted(reversed(emojis)), emojis)
        for first, second in zip(emojis, emojis[1:]):
            self.assertLess(first, second)
            self.assertGreater(second, first)
            self.assertFalse(second < first)
        # A variant sorts right after the default of its family
        self.assertLess(catalog.lookup('👋'), catalog.lookup('👋🏻'))
        self.assertLess(catalog.lookup('👋🏿'), catalog.lookup('🤚'))
        self.assertLess(catalog.lookup('👋🏽'), catalog.lookup('👋🏾'))

    def test_first_and_last(self) -> None:
        emojis = list(catalog.iter_emoji())
        self.assertEqual(emojis[0].as_str(), '😀')
        self.assertEqual(emojis[-1].shortcode(), 'flag_wales')
        self.assertEqual(emojis[-1].name(), 'flag: Wales')

    def test_iteration_is_restartable(self) -> None:
        self.assertEqual(list(catalog.iter_emoji()),
                         list(catalog.iter_emoji()))

    def test_iteration_yields_defaults_only(self) -> None:
        for emoji in catalog.iter_emoji():
            self.assertIn(emoji.skin_tone(),
                          (None, catalog.SkinTone.DEFAULT))
        self.assertNotIn('👋🏻', [str(e) for e in catalog.iter_emoji()])
        self.assertIn('👋', [str(e) for e in catalog.iter_emoji()])

    def test_no_duplicates(self) -> None:
        emojis = list(catalog.iter_emoji())
        self.assertEqual(len(set(emojis)), len(emojis))

    def test_every_emoji_is_found_again(self) -> None:
        for index in range(len(self.catalog)):
            record = self.catalog.record(index)
            emoji = catalog.lookup(record.emoji)
            self.assertEqual(emoji.as_str(), record.emoji)
            self.assertEqual(self.catalog.position(record.emoji), index)

    def test_equality_and_hash(self) -> None:
        rocket = catalog.lookup('🚀')
        self.assertEqual(rocket, rocket)
        self.assertEqual(rocket, '🚀')
        self.assertNotEqual(rocket, '😀')
        self.assertNotEqual(rocket, 42)
        self.assertEqual(hash(rocket), hash('🚀'))
        self.assertEqual({rocket: 'x'}[catalog.lookup('🚀')], 'x')
        self.assertEqual(str(rocket), '🚀')
        self.assertEqual(repr(rocket), "Emoji('🚀')")

    def test_ordering_against_other_types(self) -> None:
        rocket = catalog.lookup('🚀')
        with self.assertRaises(TypeError):
            _ = rocket < '😀'
        with self.assertRaises(TypeError):
            _ = rocket >= 1

    def test_ordering_across_catalogs(self) -> None:
        other = small_catalog()
        with self.assertRaises(TypeError):
            _ = other.lookup('😀') < catalog.lookup('🚀')
        # Equality only depends on the sequence
        self.assertEqual(other.lookup('🚀'), catalog.lookup('🚀'))

    def test_emoji_index_out_of_range(self) -> None:
        other = small_catalog()
        self.assertEqual(catalog.Emoji(other, 2).as_str(), '🔣')
        with self.assertRaises(IndexError):
            catalog.Emoji(other, 3)
        with self.assertRaises(IndexError):
            catalog.Emoji(other, -1)

    def test_position_unknown(self) -> None:
        with self.assertRaises(KeyError):
            self.catalog.position('not an emoji')

    def test_shortcodes(self) -> None:
        self.assertEqual(catalog.lookup('🚀').shortcode(), 'rocket')
        self.assertEqual(catalog.lookup('❤\ufe0f').shortcode(), 'red_heart')
        self.assertEqual(catalog.lookup('🪅').shortcode(), 'pinata')
        self.assertEqual(catalog.lookup('0\ufe0f⃣').shortcode(),
                         'keycap_0')
        self.assertEqual(catalog.lookup('*\ufe0f⃣').shortcode(),
                         'keycap_asterisk')
        self.assertEqual(catalog.lookup('🇨🇮').shortcode(),
                         'flag_cote_d_ivoire')
        self.assertEqual(catalog.lookup('🧔🏻\u200d♂\ufe0f').shortcode(),
                         'man_beard_light_skin_tone')

    def test_shortcode_is_first_of_shortcodes(self) -> None:
        for index in range(len(self.catalog)):
            emoji = catalog.Emoji(self.catalog, index)
            self.assertEqual(next(emoji.shortcodes(), None),
                             emoji.shortcode())

    def test_shortcodes_of_small_catalog(self) -> None:
        other = small_catalog()
        rocket = other.lookup('🚀')
        self.assertEqual(rocket.shortcode(), 'rocket')
        self.assertEqual(list(rocket.shortcodes()), ['rocket', 'space_rocket'])
        symbols = other.lookup('🔣')
        self.assertIsNone(symbols.shortcode())
        self.assertEqual(list(symbols.shortcodes()), [])
        self.assertEqual(other.get_by_shortcode('space_rocket'), '🚀')

    def test_get_by_shortcode(self) -> None:
        self.assertEqual(catalog.get_by_shortcode('rocket'), '🚀')
        self.assertEqual(catalog.get_by_shortcode(':rocket:'), '🚀')
        self.assertEqual(catalog.get_by_shortcode('waving_hand_dark_skin_tone'),
                         '👋🏿')
        self.assertIsNone(catalog.get_by_shortcode(''))
        self.assertIsNone(catalog.get_by_shortcode('::'))
        self.assertIsNone(catalog.get_by_shortcode(':rocket'))
        self.assertIsNone(catalog.get_by_shortcode('Rocket'))

    def test_every_shortcode_is_found_again(self) -> None:
        for index in range(len(self.catalog)):
            emoji = catalog.Emoji(self.catalog, index)
            for shortcode in emoji.shortcodes():
                self.assertEqual(catalog.get_by_shortcode(shortcode), emoji)

    def test_newer_emoji(self) -> None:
        self.assertEqual(catalog.lookup('🙂\u200d↔\ufe0f').name(),
                         'head shaking horizontally')
        self.assertEqual(str(catalog.lookup('🐦\u200d🔥').unicode_version()),
                         '15.1')
        self.assertEqual(catalog.lookup('🐦\u200d🔥').shortcode(), 'phoenix')

    def test_default_catalog_loaded_once(self) -> None:
        saved_catalog = catalog._DEFAULT_CATALOG
        results = []
        def load() -> None:
            results.append(catalog.default_catalog())
        try:
            catalog._DEFAULT_CATALOG = None
            with mock.patch.object(catalog, 'load_catalog',
                                   wraps=catalog.load_catalog) as load_mock:
                threads = [threading.Thread(target=load) for _ in range(8)]
                for thread in threads:
                    thread.start()
                for thread in threads:
                    thread.join()
                self.assertEqual(load_mock.call_count, 1)
            self.assertEqual(len(results), 8)
            for result in results:
                self.assertIs(result, results[0])
        finally:
            catalog._DEFAULT_CATALOG = saved_catalog

    def test_concurrent_queries(self) -> None:
        expected = [(str(e), e.shortcode()) for e in catalog.iter_emoji()]
        results = []
        def query() -> None:
            results.append([(str(e), catalog.lookup(str(e)).shortcode())
                            for e in catalog.iter_emoji()])
        threads = [threading.Thread(target=query) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(len(results), 4)
        for result in results:
            self.assertEqual(result, expected)

if __name__ == '__main__':
    LOG_HANDLER = logging.StreamHandler(stream=sys.stderr)
    LOGGER.setLevel(logging.DEBUG)
    LOGGER.addHandler(LOG_HANDLER)
    unittest.main()
