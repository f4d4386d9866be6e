import sys
import os
import unittest
from unittest import mock

sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from template_parser import (TemplateDocumentParser, extract_header, modality_from_source,
                             split_blocks)

PARSER_CONFIG = {
    'block_separator': '---',
    'fallback_region': 'Geral',
    'fallback_title': 'Sem Título',
    'source_hints': [['rx', 'RX'], ['usg', 'US'], ['tc', 'TC']],
    'default_modality': 'OT',
    'modality_map': {'RX': 'RX', 'TC': 'TC', 'RM': 'RM', 'US': 'US', 'USG': 'US', 'MG': 'MG', 'OT': 'OT'},
}

DOCUMENT = """## 1.1 RX – Crânio
**Título:** RX Crânio PA
**Método:** Incidência PA.
**Achados:** Sem alterações.
**Conclusão:** Normal.
---
**Título:** USG Abdome
**Achados:** Fígado normal.
---
Texto introdutório sem campos.
---
"""


class TestTemplateParser(unittest.TestCase):

    def setUp(self):
        self.parser = TemplateDocumentParser(PARSER_CONFIG)

    def test_parse_document(self):
        result = self.parser.parse_document(DOCUMENT, 'templates_usg.md')
        self.assertEqual(len(result.records), 2)
        self.assertEqual(result.skipped, 1)

        crânio, abdome = result.records
        self.assertEqual(crânio.title, 'RX Crânio PA')
        self.assertEqual(crânio.modality, 'RX')
        self.assertEqual(crânio.body_region, 'Crânio')
        self.assertEqual([(s.label, s.default_content) for s in crânio.sections],
                         [('Método', 'Incidência PA.'), ('Achados', 'Sem alterações.'), ('Conclusão', 'Normal.')])
        self.assertEqual(crânio.complexity, 1)
        self.assertTrue(crânio.is_active)

        # No header: modality comes from the file name, region falls back
        self.assertEqual(abdome.modality, 'US')
        self.assertEqual(abdome.body_region, 'Geral')
        self.assertEqual(abdome.section_labels(), ['Método', 'Achados', 'Conclusão'])
        self.assertEqual(abdome.sections[0].default_content, '')

    def test_header_region_stops_at_next_dash(self):
        header = extract_header('## TC - Ombro – Direito\n**Título:** TC Ombro')
        self.assertEqual(header.modality, 'TC')
        self.assertEqual(header.region, 'Ombro')

    def test_header_modality_is_canonicalized(self):
        records = self.parser.parse('## USG – Abdome\n**Título:** USG Abdome Total\n**Achados:** Normal.', 'x.md')
        self.assertEqual(records[0].modality, 'US')

    def test_unknown_header_modality_passes_through(self):
        records = self.parser.parse('## PET – Corpo\n**Título:** PET Corpo Inteiro\n**Achados:** Normal.', 'x.md')
        self.assertEqual(records[0].modality, 'PET')

    def test_missing_title_with_content_uses_fallback(self):
        records = self.parser.parse('**Achados:** Fígado normal.', 'notes.txt')
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].title, 'Sem Título')
        self.assertEqual(records[0].modality, 'OT')

    def test_empty_title_label_is_discarded_without_content(self):
        result = self.parser.parse_document('**Título:**\n**Conclusão:** Normal.', 'rx.md')
        self.assertEqual(result.records, [])
        self.assertEqual(result.skipped, 1)

    def test_labels_without_colon_and_numbered_header(self):
        document = ('## 2.1.1 RX – Crânio\n'
                    '**Título** RX Crânio PA e Perfil\n'
                    '**Método** Incidências PA e perfil.\n'
                    '**Achados** Sem alterações.\n'
                    '**Conclusão** Normal.\n')
        records = self.parser.parse(document, 'notes.txt')
        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].title, 'RX Crânio PA e Perfil')
        self.assertEqual(records[0].modality, 'RX')
        self.assertEqual(records[0].body_region, 'Crânio')
        self.assertEqual([(s.label, s.default_content) for s in records[0].sections],
                         [('Método', 'Incidências PA e perfil.'), ('Achados', 'Sem alterações.'),
                          ('Conclusão', 'Normal.')])

    def test_empty_method_without_title_is_discarded(self):
        result = self.parser.parse_document('**Método**\n---\n**Método:**\n**Conclusão** Normal.', 'rx.md')
        self.assertEqual(result.records, [])
        self.assertEqual(result.skipped, 2)

    def test_separator_must_be_alone_on_its_line(self):
        blocks = split_blocks('a --- b\n----\nc\n---\nd')
        self.assertEqual(len(blocks), 2)
        self.assertIn('----', blocks[0])

    def test_blank_document(self):
        self.assertEqual(split_blocks(''), [])
        self.assertEqual(self.parser.parse_document('\n---\n   \n', 'rx.md').records, [])

    def test_source_hint_first_match_wins(self):
        hints = PARSER_CONFIG['source_hints']
        self.assertEqual(modality_from_source('RX_e_TC.md', hints), 'RX')
        self.assertEqual(modality_from_source('modelos_TC.md', hints), 'TC')
        self.assertEqual(modality_from_source('notes.txt', hints), 'OT')

    def test_failing_block_does_not_abort_document(self):
        original = self.parser.parse_block
        calls = []

        def flaky(block, source_hint):
            calls.append(block)
            if len(calls) == 1:
                raise ValueError('boom')
            return original(block, source_hint)

        with mock.patch.object(self.parser, 'parse_block', side_effect=flaky):
            result = self.parser.parse_document(DOCUMENT, 'templates_usg.md')
        self.assertEqual([r.title for r in result.records], ['USG Abdome'])
        self.assertEqual(result.skipped, 2)


if __name__ == '__main__':
    unittest.main()
