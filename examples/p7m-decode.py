#!/usr/bin/env vpython3
# *-* coding: utf-8 *-*
import sys

import unp7m
from unp7m import output


def main():
    for fname in sys.argv[1:] or ['fattura.xml.p7m']:
        print('*' * 20, fname)
        try:
            payload = unp7m.unwrap_file(fname, nested=True)
        except FileNotFoundError:
            print("no such file", fname)
            continue
        except unp7m.UnwrapError as ex:
            print('failed:', ex.kind, ex)
            continue
        print('name:', payload.suggested_name)
        print('type:', payload.mime_type)
        print('envelopes:', payload.depth)
        if payload.is_text:
            print(payload.text())
        else:
            print('saved to', output.save(payload, '.'))


main()
