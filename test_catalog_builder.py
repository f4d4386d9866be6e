import sys
import os
import unittest

sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from catalog_builder import build_catalog, catalog_modality
from catalog_data import default_templates
from catalog_index import CatalogIndex
from template_models import TemplateRecord


class TestCatalogBuilder(unittest.TestCase):

    def setUp(self):
        self.templates = [
            TemplateRecord(title='RX Joelho', modality='RX', body_region='Joelho'),
            TemplateRecord(title='RX Crânio', modality='RX', body_region='Crânio'),
            TemplateRecord(title='RX Antigo', modality='RX', body_region='Crânio', is_active=False),
            TemplateRecord(title='USG Tireóide', modality='US', body_region='Tireóide'),
            TemplateRecord(title='Mamografia Digital', modality='MMG', body_region='Mama'),
        ]

    def test_groups_by_modality_and_region(self):
        catalog = build_catalog(self.templates, lateral_regions=['Joelho'])
        self.assertEqual(sorted(catalog), ['MG', 'RX', 'USG'])
        self.assertEqual([g.region_name for g in catalog['RX']], ['Crânio', 'Joelho'])

        crânio, joelho = catalog['RX']
        self.assertEqual([e.name for e in crânio.exams], ['RX Crânio'])
        self.assertFalse(crânio.exams[0].has_laterality)
        self.assertTrue(joelho.exams[0].has_laterality)

    def test_inactive_templates_are_ignored(self):
        catalog = build_catalog(self.templates, lateral_regions=[])
        names = [e.name for groups in catalog.values() for g in groups for e in g.exams]
        self.assertNotIn('RX Antigo', names)

    def test_angio_modality(self):
        self.assertEqual(catalog_modality(TemplateRecord(title='Angio-TC de Aorta', modality='ANGIO')), 'TC')
        self.assertEqual(catalog_modality(TemplateRecord(title='Angio-RM Venosa', modality='ANGIO')), 'RM')
        self.assertEqual(catalog_modality(TemplateRecord(title='Angiografia Cerebral', modality='ANGIO')), 'OT')

    def test_built_catalog_is_searchable(self):
        index = CatalogIndex(build_catalog(self.templates, lateral_regions=['Joelho']))
        hits = index.search('USG', 'tireó')
        self.assertEqual([h.entry.name for h in hits], ['USG Tireóide'])

    def test_default_seed_set_fills_every_modality(self):
        templates = default_templates()
        self.assertEqual(len(templates), 84)
        catalog = build_catalog(templates, lateral_regions=[])
        self.assertEqual(sorted(catalog), ['MG', 'RM', 'RX', 'TC', 'USG'])

        rm_names = [e.name for g in catalog['RM'] for e in g.exams]
        self.assertIn('Angiorressonância Venosa do Crânio', rm_names)
        self.assertIn('RM Multiparamétrica Próstata', rm_names)
        tc_names = [e.name for g in catalog['TC'] for e in g.exams]
        self.assertIn('Angiotomografia das Artérias Coronárias', tc_names)
        self.assertEqual([e.name for g in catalog['MG'] for e in g.exams], ['Mamografia'])

    def test_default_templates_are_fresh_copies(self):
        first, second = default_templates(), default_templates()
        first[0].id = 'assigned'
        self.assertIsNone(second[0].id)


if __name__ == '__main__':
    unittest.main()
