import sys
import os
import unittest

sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from catalog_data import EXAM_CATALOG
from catalog_index import CatalogIndex, CatalogIndexHolder, build_default_index
from template_models import CatalogEntry, RegionGroup


class TestCatalogSearch(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.index = CatalogIndex(EXAM_CATALOG)

    def names(self, hits):
        return [h.entry.name for h in hits]

    def test_partial_accented_query(self):
        hits = self.index.search('RX', 'tóra')
        self.assertEqual(self.names(hits), ['RX Tórax (PA/Lateral)'])
        self.assertEqual(hits[0].region_name, 'Tórax')

    def test_case_insensitive(self):
        self.assertEqual(self.names(self.index.search('RX', 'TÓRA')), ['RX Tórax (PA/Lateral)'])

    def test_declaration_order(self):
        names = self.names(self.index.search('USG', 'doppler'))
        self.assertEqual(names[0], 'USG Escrotal com Doppler')
        self.assertEqual(names[-1], 'USG Obstétrico com Doppler')
        self.assertIn('Doppler Hepático', names)

    def test_region_restriction(self):
        self.assertEqual(self.names(self.index.search('RX', 'ombro', region='Membros Superiores')), ['RX Ombro'])
        self.assertEqual(self.index.search('RX', 'ombro', region='Coluna'), [])
        self.assertEqual(self.index.search('RX', 'ombro', region='Região Inexistente'), [])

    def test_no_match_and_unknown_modality(self):
        self.assertEqual(self.index.search('RX', 'xyz'), [])
        self.assertEqual(self.index.search('PET', 'tórax'), [])

    def test_empty_query_lists_modality(self):
        expected = sum(len(group.exams) for group in EXAM_CATALOG['RX'])
        self.assertEqual(len(self.index.search('RX', '')), expected)

    def test_modality_alias(self):
        self.assertEqual(self.names(self.index.search('US', 'ombro')), ['USG Ombro'])
        self.assertEqual(self.names(self.index.search('rx', 'ombro')), ['RX Ombro'])

    def test_regions_for(self):
        self.assertEqual([g.region_name for g in self.index.regions_for('MG')], ['Mama'])
        self.assertEqual(self.index.regions_for('PET'), ())

    def test_suggestions_for_typo(self):
        self.assertEqual(self.index.search('RX', 'joelhoo'), [])
        suggestions = self.index.suggest('RX', 'joelhoo')
        self.assertTrue(suggestions)
        self.assertEqual(suggestions[0].entry.name, 'RX Joelho')

    def test_suggestion_limit_and_order(self):
        suggestions = self.index.suggest('RX', 'rx', limit=3)
        self.assertEqual([s.entry.name for s in suggestions],
                         ['RX Crânio (PA/Lateral)', 'RX Seios da Face', 'RX Cavum'])
        self.assertEqual(self.index.suggest('RX', ''), [])

    def test_to_dict(self):
        data = self.index.to_dict()
        self.assertEqual(data['MG'][0]['name'], 'Mama')
        self.assertEqual(len(self.index), sum(len(g.exams) for groups in EXAM_CATALOG.values() for g in groups))


class TestCatalogIndexConstruction(unittest.TestCase):

    def test_from_entries(self):
        index = CatalogIndex.from_entries([
            CatalogEntry('RX Ombro', True, 'Membros Superiores', 'RX'),
            CatalogEntry('RX Coluna Lombar', False, 'Coluna', 'RX'),
            CatalogEntry('RX Punho', True, 'Membros Superiores', 'RX'),
        ])
        self.assertEqual([g.region_name for g in index.regions_for('RX')], ['Membros Superiores', 'Coluna'])
        self.assertEqual(len(index), 3)

    def test_region_restriction_spans_aliased_modality_keys(self):
        index = CatalogIndex({
            'US': [RegionGroup('Ombro', (CatalogEntry('US Ombro', True, 'Ombro', 'US'),))],
            'USG': [RegionGroup('Ombro', (CatalogEntry('USG Ombro com Doppler', True, 'Ombro', 'USG'),))],
        })
        hits = index.search('USG', '', region='Ombro')
        self.assertEqual([h.entry.name for h in hits], ['US Ombro', 'USG Ombro com Doppler'])
        self.assertEqual([h.entry.name for h in index.search('US', 'ombro', region='Ombro')],
                         ['US Ombro', 'USG Ombro com Doppler'])

    def test_holder_swaps_whole_snapshot(self):
        holder = CatalogIndexHolder()
        before = holder.current()
        self.assertEqual(len(before), 0)

        rebuilt = holder.rebuild(EXAM_CATALOG)
        self.assertIs(holder.current(), rebuilt)
        self.assertEqual(len(before), 0)
        self.assertEqual(len(rebuilt), len(build_default_index()))


if __name__ == '__main__':
    unittest.main()
