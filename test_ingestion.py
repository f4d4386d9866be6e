import sys
import os
import tempfile
import unittest

sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from catalog_data import default_templates
from database_models import StorageError, TemplateStore
from ingestion import import_documents, run_deduplication, seed_templates, verify_templates
from template_models import TemplateRecord, TemplateSection

RX_DOCUMENT = """## 1 RX – Tórax
**Título:** RX Tórax PA
**Método:** Incidência PA.
**Achados:** Campos pulmonares livres.
**Conclusão:** Normal.
---
## 2 RX – Crânio
**Título:** RX Crânio
**Achados:** Sem alterações.
---
Sem campos aqui.
"""


class TestImportDocuments(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.store = TemplateStore(os.path.join(self.tmp.name, 'templates.db'))
        self.rx_path = os.path.join(self.tmp.name, 'modelos_rx.md')
        with open(self.rx_path, 'w', encoding='utf-8') as f:
            f.write(RX_DOCUMENT)

    def tearDown(self):
        self.tmp.cleanup()

    def test_import_counts(self):
        summary = import_documents([self.rx_path], self.store)
        self.assertEqual((summary.imported, summary.skipped, summary.failed_files), (2, 1, []))
        self.assertTrue(self.store.find_existing('RX Tórax PA', 'RX'))

    def test_reimport_skips_existing(self):
        import_documents([self.rx_path], self.store)
        summary = import_documents([self.rx_path], self.store)
        self.assertEqual(summary.imported, 0)
        self.assertEqual(summary.skipped, 3)
        self.assertEqual(self.store.count(), 2)

    def test_failed_files_do_not_stop_the_batch(self):
        missing = os.path.join(self.tmp.name, 'missing.md')
        binary = os.path.join(self.tmp.name, 'broken_tc.md')
        with open(binary, 'wb') as f:
            f.write(b'\xff\xfe\xfa invalid utf-8')

        summary = import_documents([missing, binary, self.rx_path], self.store)
        self.assertEqual(summary.failed_files, [missing, binary])
        self.assertEqual(summary.imported, 2)
        self.assertEqual(summary.to_dict()['failedFiles'], [missing, binary])

    def test_storage_failure_keeps_counts_of_stored_templates(self):
        real_create = self.store.create
        calls = []

        def create_once(record):
            calls.append(record.title)
            if len(calls) > 1:
                raise StorageError('disk full')
            return real_create(record)

        self.store.create = create_once
        summary = import_documents([self.rx_path], self.store)
        self.assertEqual(summary.failed_files, [self.rx_path])
        self.assertEqual(summary.imported, 1)
        self.assertEqual(summary.skipped, 1)
        self.assertEqual(self.store.count(), 1)


class TestMaintenanceJobs(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.store = TemplateStore(os.path.join(self.tmp.name, 'templates.db'))

    def tearDown(self):
        self.tmp.cleanup()

    def test_seed_is_idempotent(self):
        self.assertEqual(seed_templates(self.store), len(default_templates()))
        self.assertEqual(seed_templates(self.store), 0)

    def test_seed_loads_every_default_template(self):
        self.assertEqual(seed_templates(self.store), 84)
        self.assertTrue(self.store.find_existing('Mamografia', 'MMG'))
        self.assertTrue(self.store.find_existing('Angiotomografia das Artérias Coronárias', 'ANGIO'))

    def test_fuzzy_deduplication(self):
        poor = self.store.create(TemplateRecord(title='TC Crânio', modality='TC',
                                                sections=[TemplateSection('Achados', 'Normal.')]))
        rich = self.store.create(TemplateRecord(title='TC Crânio com Contraste', modality='TC',
                                                sections=[TemplateSection('Achados', 'Sem lesões expansivas.')]))
        self.store.create(TemplateRecord(title='RX Crânio', modality='RX'))

        summary = run_deduplication(self.store)
        self.assertEqual(summary.deleted, [poor])
        self.assertIsNotNone(self.store.get(rich))
        self.assertEqual(run_deduplication(self.store).deleted, [])

    def test_exact_deduplication(self):
        self.store.create(TemplateRecord(title='RX Tórax', modality='RX'))
        self.store.create(TemplateRecord(title='RX Tórax', modality='RX',
                                         sections=[TemplateSection('Achados', 'Texto mais longo.')]))
        self.store.create(TemplateRecord(title='RX Tórax PA', modality='RX'))

        summary = run_deduplication(self.store, 'exact')
        self.assertEqual(len(summary.deleted), 1)
        self.assertEqual(self.store.count(), 2)

    def test_unknown_mode(self):
        with self.assertRaises(ValueError):
            run_deduplication(self.store, 'aggressive')

    def test_verify(self):
        self.store.create(TemplateRecord(title='RX Tórax', modality='RX', body_region='Tórax',
                                         sections=[TemplateSection('Método'), TemplateSection('Achados')]))
        report = verify_templates(self.store)
        self.assertEqual(report['total'], 1)
        self.assertEqual(report['recent'][0]['sections'], ['Método', 'Achados'])
        self.assertEqual(report['recent'][0]['bodyRegion'], 'Tórax')


if __name__ == '__main__':
    unittest.main()
