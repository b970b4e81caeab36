# *-* coding: utf-8 *-*
"""Command line front end: ``unp7m decode|info|wrap FILE...``"""
import argparse
import logging
import sys

from cryptography import x509
from cryptography.hazmat.primitives import serialization

from unp7m import classifier, normalizer, output, signeddata, signer, unwrapper
from unp7m.errors import UnwrapError


logger = logging.getLogger(__name__)


def logging_level(string):
    """Convert a string to a logging level"""
    if string.isnumeric():
        return int(string)
    level = getattr(logging, string.upper(), None)
    if not isinstance(level, int):
        raise argparse.ArgumentTypeError("invalid log level {}".format(string))
    return level


def describe(payload, original, savedpath=None):
    lines = [
        '# Decoded: {}'.format(payload.suggested_name),
        'Original file: {}'.format(original),
        'Type: {}'.format(payload.mime_type),
    ]
    if payload.depth > 1:
        lines.append('Envelopes: {}'.format(payload.depth))
    lines.append('---')
    if payload.is_text and savedpath is None:
        lines.append(payload.text())
    else:
        lines.append('[{} file: {}]'.format('Text' if payload.is_text else 'Binary', payload.suggested_name))
        lines.append('Size: {} bytes'.format(len(payload.data)))
        lines.append('Type: {}'.format(payload.mime_type))
        lines.append('Saved to: {}'.format(savedpath))
    return '\n'.join(lines)


def cmd_decode(args):
    status = 0
    for fname in args.files:
        if not classifier.is_p7m(fname):
            logger.error('%s: not a .p7m file', fname)
            status = 1
            continue
        try:
            payload = unwrapper.unwrap_file(fname, nested=args.nested, max_depth=args.max_depth)
        except UnwrapError as ex:
            logger.error('%s: failed to decode (%s): %s', fname, ex.kind, ex)
            status = 1
            continue
        except OSError as ex:
            logger.error('%s: %s', fname, ex)
            status = 1
            continue
        savedpath = None
        if args.output is not None or not payload.is_text:
            try:
                savedpath = output.save(payload, args.output)
            except OSError as ex:
                logger.error('%s: failed to save: %s', fname, ex)
                status = 1
                continue
        print(describe(payload, fname, savedpath))
    return status


def cmd_info(args):
    status = 0
    for fname in args.files:
        try:
            with open(fname, 'rb') as fp:
                data = fp.read()
            envelope = normalizer.normalize(data)
            signed = signeddata.parse(normalizer.to_der(envelope.data))
        except (UnwrapError, OSError) as ex:
            logger.error('%s: %s', fname, ex)
            status = 1
            continue
        print('{}:'.format(fname))
        print('  encoding:      {}'.format(envelope.encoding.value))
        print('  content type:  {}'.format(signeddata.oid_name(signed.content_type)))
        print('  version:       {}'.format(signed.version))
        print('  digests:       {}'.format(', '.join(signeddata.oid_name(a) for a in signed.digest_algorithms)))
        print('  eContentType:  {}'.format(signeddata.oid_name(signed.econtent_type)))
        if signed.detached:
            print('  content:       detached')
        else:
            print('  content:       {} bytes'.format(len(signed.econtent)))
        print('  certificates:  {}'.format('yes' if signed.certificates else 'no'))
    return status


def cmd_wrap(args):
    with open(args.key, 'rb') as fp:
        password = args.password.encode('utf-8') if args.password else None
        key = serialization.load_pem_private_key(fp.read(), password)
    with open(args.cert, 'rb') as fp:
        cert = x509.load_pem_x509_certificate(fp.read())
    with open(args.file, 'rb') as fp:
        datau = fp.read()
    datas = signer.sign(datau, key, cert, [], args.hash, attrs=True, detached=args.detached)
    if args.pem:
        datas = signer.armor(datas)
    fname = args.output or args.file + '.p7m'
    with open(fname, 'wb') as fp:
        fp.write(datas)
    logger.info('wrote %s', fname)
    return 0


def main(argv=None):
    """Program entry point"""
    parser = argparse.ArgumentParser(prog='unp7m', description="Extract the content of PKCS#7 .p7m signed files")
    parser.add_argument('-l', '--level', action='store',
                        type=logging_level, default=logging.WARNING,
                        help="set logging level")
    parser.add_argument('-d', '--debug', dest='level',
                        action='store_const', const=logging.DEBUG,
                        help="log debug messages")
    subparsers = parser.add_subparsers(dest='command', required=True)

    sub = subparsers.add_parser('decode', help="extract the signed content")
    sub.add_argument('files', nargs='+', metavar='FILE')
    sub.add_argument('-o', '--output', metavar='DIR',
                     help="save payloads here (binary payloads default to ~/Downloads)")
    sub.add_argument('-n', '--nested', action='store_true',
                     help="also unwrap .p7m.p7m files signed more than once")
    sub.add_argument('--max-depth', type=int, default=unwrapper.DEFAULT_MAX_DEPTH,
                     help="maximum number of envelopes to remove with --nested")
    sub.set_defaults(func=cmd_decode)

    sub = subparsers.add_parser('info', help="describe the envelope structure")
    sub.add_argument('files', nargs='+', metavar='FILE')
    sub.set_defaults(func=cmd_info)

    sub = subparsers.add_parser('wrap', help="sign a file into a .p7m envelope")
    sub.add_argument('file', metavar='FILE')
    sub.add_argument('-k', '--key', required=True, help="PEM private key")
    sub.add_argument('-c', '--cert', required=True, help="PEM certificate")
    sub.add_argument('-p', '--password', help="private key password")
    sub.add_argument('-o', '--output', help="output file (default FILE.p7m)")
    sub.add_argument('--hash', default=signer.DEFAULT_HASHALGO, help="digest algorithm")
    sub.add_argument('--pem', action='store_true', help="write PEM instead of DER")
    sub.add_argument('--detached', action='store_true', help="leave the content out")
    sub.set_defaults(func=cmd_wrap)

    args = parser.parse_args(argv)
    logging.basicConfig(format='[%(levelname)s] %(name)s: %(message)s', level=args.level)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
