#!/usr/bin/env vpython3
# coding: utf-8
import os
import shutil
import tempfile
import unittest
from unittest import mock

from unp7m import classifier, output


class SaveTests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_save(self):
        payload = classifier.classify(b'%PDF-1.7', 'contratto.pdf.p7m')
        directory = os.path.join(self.tmpdir, 'nuova')
        path = output.save(payload, directory)
        assert path == os.path.join(directory, 'contratto.pdf')
        with open(path, 'rb') as fp:
            assert fp.read() == b'%PDF-1.7'
        assert os.listdir(directory) == ['contratto.pdf']

    def test_overwrite(self):
        output.save(classifier.classify(b'one', 'a.txt.p7m'), self.tmpdir)
        path = output.save(classifier.classify(b'two', 'a.txt.p7m'), self.tmpdir)
        with open(path, 'rb') as fp:
            assert fp.read() == b'two'
        with self.assertRaises(FileExistsError):
            output.save(classifier.classify(b'three', 'a.txt.p7m'), self.tmpdir, overwrite=False)

    def test_unnamed_payload(self):
        path = output.save(classifier.classify(b'x', '.p7m'), self.tmpdir)
        assert os.path.basename(path) == 'decoded'

    def test_failed_write_leaves_nothing_behind(self):
        payload = classifier.classify(b'x', 'a.txt.p7m')
        with mock.patch('os.replace', side_effect=OSError('disk full')):
            with self.assertRaises(OSError):
                output.save(payload, self.tmpdir)
        assert os.listdir(self.tmpdir) == []

    def test_default_directory(self):
        with mock.patch.dict(os.environ, {'HOME': self.tmpdir}):
            assert output.default_directory() == os.path.join(self.tmpdir, 'Downloads')
            path = output.save(classifier.classify(b'x', 'a.txt.p7m'))
        assert path == os.path.join(self.tmpdir, 'Downloads', 'a.txt')
