#!/usr/bin/python
'''
Command-line access to RINEX observation files.

    rinexobs stat FILE...             summary of each file
    rinexobs diff FILE1 FILE2         compare two files epoch by epoch
    rinexobs print FILE               list all observations
    rinexobs header FILE              show the header
    rinexobs crx2rnx|rnx2crx FILE     Hatanaka decompression / compression
    rinexobs rnx3name FILE CCC        RINEX 3 file name (CCC: country code)

Files may be gzipped (.gz) or compress'd (.Z).
'''

import json
import sys
import warnings
from optparse import OptionParser

from . import __ver__
from .diff import DiffOptions, ALLSYS
from .errors import RinexError
from .hatanaka import ToolError
from .obsfile import ObsFile
from .rinex import RNX_VER
from .utility import showwarn

COMMANDS = ('stat', 'diff', 'print', 'header', 'crx2rnx', 'rnx2crx', 'rnx3name')


def run(cmd, args, opts, out=None):
    '''Carry out one command; returns the exit status.'''
    if out is None:
        out = sys.stdout
    dopts = DiffOptions(opts.satsys, opts.snr, opts.header)
    if cmd == 'rnx3name':
        if len(args) != 2:
            raise ValueError('rnx3name needs a file and a country code')
        fil = ObsFile(args[0], dopts)
        fil.country_code = args[1]
        print(fil.rnx3_filename(), file=out)
        return 0
    files = [ObsFile(arg, dopts) for arg in args]
    if cmd == 'stat':
        for fil in files:
            stat = fil.stat()
            if opts.json:
                print(json.dumps(stat.as_dict()), file=out)
            else:
                print(fil.path + ': ' + str(stat), file=out)
    elif cmd == 'diff':
        if len(files) != 2:
            raise ValueError('diff needs exactly two files')
        nsync, found = files[0].diff(files[1],
                                     lambda dis: print('diff: ' + str(dis), file=out))
        print('%d common epochs, %d differences' % (nsync, len(found)), file=out)
        return 1 if found else 0
    elif cmd == 'print':
        for fil in files:
            with fil.decoder() as dec:
                for epoch in dec:
                    if dopts.satsys != ALLSYS:
                        print(epoch.format_tab(dopts.satsys), file=out)
                    else:
                        print(epoch.format(), file=out)
                if dec.err is not None:
                    raise dec.err
    elif cmd == 'header':
        for fil in files:
            hdr = fil.header()
            print(fil.path + ': ' + str(hdr), file=out)
            if opts.verbose:
                print('\n'.join(hdr.comments), file=out)
    elif cmd in ('crx2rnx', 'rnx2crx'):
        for fil in files:
            newpath = fil.decompress() if cmd == 'crx2rnx' else fil.compress()
            print(newpath, file=out)
    return 0


def main():
    '''Decode, summarize and compare RINEX 3 observation files.'''
    usage = '%prog [-vV] [-s SYSTEMS] [--snr] [--header] [-j] ' \
            '{' + '|'.join(COMMANDS) + '} FILE...'
    parser = OptionParser(description=main.__doc__, usage=usage, prog='rinexobs')
    parser.add_option('-v', '--version', action='store_true',
                      help='Show version and quit')
    parser.add_option('-V', '--verbose', action='store_true',
                      help='Verbose operation')
    parser.add_option('-s', '--satsys', action='store', default=ALLSYS,
                      help='Satellite systems to use, e.g. GRE (default: all)')
    parser.add_option('--snr', action='store_true', default=False,
                      help='diff: also compare signal strength indicators')
    parser.add_option('--header', action='store_true', default=False,
                      help='diff: also compare the headers')
    parser.add_option('-j', '--json', action='store_true', default=False,
                      help='stat: print statistics as JSON')
    (opts, args) = parser.parse_args()
    if opts.version:
        print('rinexobs version', __ver__, 'supporting RINEX version', RNX_VER)
        return 0
    if not args or args[0] not in COMMANDS:
        parser.error('command required: one of ' + ', '.join(COMMANDS))
    if len(args) < 2:
        parser.error('Filename required.')
    warnings.showwarning = showwarn
    if not opts.verbose:
        warnings.simplefilter('once')
    try:
        return run(args[0], args[1:], opts)
    except (RinexError, ToolError, ValueError, OSError) as err:
        print(err, file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
