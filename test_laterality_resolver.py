import sys
import os
import unittest

sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from laterality_resolver import append_side, extract_laterality, side_label
from template_models import Side


class TestExtractLaterality(unittest.TestCase):

    def assertResolves(self, raw, clean, side):
        result = extract_laterality(raw)
        self.assertEqual((result.clean_name, result.detected_side), (clean, side), raw)

    def test_sides(self):
        self.assertResolves('USG Ombro Direito', 'USG Ombro', Side.RIGHT)
        self.assertResolves('RX Mão Esquerda', 'RX Mão', Side.LEFT)
        self.assertResolves('Mamografia Bilateral', 'Mamografia', Side.BILATERAL)

    def test_case_insensitive(self):
        self.assertResolves('usg ombro DIREITO', 'usg ombro', Side.RIGHT)

    def test_leading_hyphen_removed(self):
        self.assertResolves('RX Joelho - Esquerdo', 'RX Joelho', Side.LEFT)
        self.assertResolves('RX Joelho – Direito', 'RX Joelho', Side.RIGHT)

    def test_empty_parentheses_removed(self):
        self.assertResolves('RX Punho (Direito)', 'RX Punho', Side.RIGHT)

    def test_bilateral_takes_precedence(self):
        self.assertResolves('RX Joelhos Bilateral (Direito e Esquerdo)',
                            'RX Joelhos (Direito e Esquerdo)', Side.BILATERAL)

    def test_plural_and_adverb_forms_removed_whole(self):
        self.assertResolves('RX Pés Esquerdos', 'RX Pés', Side.LEFT)
        self.assertResolves('RX Joelhos Direitos', 'RX Joelhos', Side.RIGHT)
        self.assertResolves('USG Mamas Bilateralmente', 'USG Mamas', Side.BILATERAL)
        self.assertResolves('RX Mãos - Esquerdas', 'RX Mãos', Side.LEFT)

    def test_no_side(self):
        self.assertResolves('TC Tórax', 'TC Tórax', Side.NONE)
        self.assertResolves('', '', Side.NONE)

    def test_to_dict(self):
        self.assertEqual(extract_laterality('USG Ombro Direito').to_dict(),
                         {'cleanName': 'USG Ombro', 'detectedSide': 'right'})


class TestAppendSide(unittest.TestCase):

    def test_append(self):
        self.assertEqual(append_side('USG Ombro', Side.RIGHT), 'USG Ombro Direito')
        self.assertEqual(append_side('USG Mão', Side.LEFT, feminine=True), 'USG Mão Esquerda')
        self.assertEqual(append_side('Mamografia', Side.BILATERAL), 'Mamografia Bilateral')
        self.assertEqual(append_side('TC Tórax ', Side.NONE), 'TC Tórax')

    def test_side_label(self):
        self.assertEqual(side_label(Side.NONE), '')
        self.assertEqual(side_label(Side.RIGHT, feminine=True), 'Direita')

    def test_extract_then_append_restores_name(self):
        result = extract_laterality('RX Joelho Esquerdo')
        self.assertEqual(append_side(result.clean_name, result.detected_side), 'RX Joelho Esquerdo')


if __name__ == '__main__':
    unittest.main()
