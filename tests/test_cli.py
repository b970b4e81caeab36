#!/usr/bin/env vpython3
# coding: utf-8
import contextlib
import io
import os
import shutil
import tempfile
import unittest

import unp7m
from unp7m import cli, signer

from . import envelopes, test_cert


class CLITests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def write(self, name, data):
        fname = os.path.join(self.tmpdir, name)
        with open(fname, 'wb') as fh:
            fh.write(data)
        return fname

    def run_cli(self, *argv):
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            status = cli.main(list(argv))
        return status, stdout.getvalue()

    def test_decode_text(self):
        fname = self.write('fattura.xml.p7m', envelopes.signed(b'<fattura/>'))
        status, out = self.run_cli('decode', fname)
        assert status == 0
        assert '# Decoded: fattura.xml' in out
        assert 'Type: application/xml' in out
        assert '<fattura/>' in out

    def test_decode_binary(self):
        fname = self.write('contratto.pdf.p7m', envelopes.signed(b'%PDF-1.7'))
        outdir = os.path.join(self.tmpdir, 'out')
        status, out = self.run_cli('decode', '-o', outdir, fname)
        assert status == 0
        assert '[Binary file: contratto.pdf]' in out
        assert 'Size: 8 bytes' in out
        saved = os.path.join(outdir, 'contratto.pdf')
        assert 'Saved to: ' + saved in out
        with open(saved, 'rb') as fh:
            assert fh.read() == b'%PDF-1.7'

    def test_decode_nested(self):
        fname = self.write('fattura.xml.p7m.p7m', envelopes.signed(envelopes.signed(b'<fattura/>')))
        status, out = self.run_cli('decode', '--nested', fname)
        assert status == 0
        assert 'Envelopes: 2' in out
        assert '<fattura/>' in out

    def test_decode_rejects_other_files(self):
        fname = self.write('fattura.xml', b'<fattura/>')
        with self.assertLogs('unp7m.cli', level='ERROR') as cm:
            status, out = self.run_cli('decode', fname)
        assert status == 1
        assert out == ''
        assert 'not a .p7m file' in cm.output[0]

    def test_decode_failure(self):
        good = self.write('a.txt.p7m', envelopes.signed(b'ciao'))
        bad = self.write('b.txt.p7m', b'\x30\x82\x01')
        with self.assertLogs('unp7m.cli', level='ERROR') as cm:
            status, out = self.run_cli('decode', bad, good)
        assert status == 1
        assert 'MalformedDer' in cm.output[0]
        assert 'ciao' in out

    def test_info(self):
        fname = self.write('a.txt.p7m', signer.armor(envelopes.signed(b'ciao', detached=True)))
        status, out = self.run_cli('info', fname)
        assert status == 0
        assert 'encoding:      PEM' in out
        assert 'content type:  signedData' in out
        assert 'digests:       sha256' in out
        assert 'content:       detached' in out
        assert 'certificates:  yes' in out

    def test_wrap(self):
        ca = test_cert.CA()
        key, cert = test_cert.rsa_user()
        keyfile = self.write('key.pem', ca.key_pem(key, '1234'))
        certfile = self.write('cert.pem', ca.cert_pem(cert))
        fname = self.write('fattura.xml', b'<fattura/>')
        status, out = self.run_cli('wrap', fname, '-k', keyfile, '-c', certfile, '-p', '1234', '--pem')
        assert status == 0
        with open(fname + '.p7m', 'rb') as fh:
            data = fh.read()
        assert data.startswith(b'-----BEGIN PKCS7-----')
        payload = unp7m.unwrap(data, 'fattura.xml.p7m')
        assert payload.data == b'<fattura/>'

    def test_usage_error(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as cm:
                cli.main([])
        assert cm.exception.code == 2

    def test_logging_level(self):
        assert cli.logging_level('debug') == 10
        assert cli.logging_level('30') == 30
