'''Miscellaneous helpers used by the RINEX reader, particularly in header.py
and rinex.py.

These are not very specific in usage, however, and could be useful anywhere.

'''
from contextlib import suppress
from textwrap import wrap
import subprocess
import sys
import os


def showwarn(message, category, filename, lineno, file=None, line=None):
    """Output pretty warnings."""
    if file is None:
        file = sys.stderr
    file.write('\n  * '.join(wrap('*** ' + str(message))) + '\n')


def decompress(filename, move=False):
    """Decompress a (Lempel-Ziv) compress'd file.

    There seems to be no Python module to do this (the gzip module won't handle it,
    though the gzip program will), so we call an external process.
    These programs will only decompress if the filename ends with .Z;
    they remove the original file and output a file without the .Z.
    """
    if not filename.endswith('.Z'):
        if move:
            defile = filename
            filename = filename + '.Z'
            os.rename(defile, filename)
        else:
            raise ValueError('Given filename ' + filename + ' does not end with .Z.')
    else:
        defile = filename[:-2]
    decompresscmds = [['uncompress', filename],
                      ['gunzip', filename],
                      ['gzip', '-d', filename]]
    for cmd in decompresscmds:
        try:
            subprocess.run(cmd, check=True)
        except (OSError, subprocess.CalledProcessError):
            print("Command '", ' '.join(cmd), "' failed. Trying another...")
            continue
        if os.path.isfile(defile):
            return defile
        else:
            print("Command '", ' '.join(cmd), "' succeeded, but did not produce the output file?!")
    raise RuntimeError('Could not get an external program to decompress the file ' + filename)


def toint(x):
    '''Integer value of a fixed-width field; blank is 0.'''
    if x is None or x.strip() == '':
        return 0
    return int(x)


def tofloat(x):
    '''Float value of a fixed-width field; blank is 0.'''
    if x is None or x.strip() == '':
        return 0.
    return float(x)


class fileread(object):
    '''
    Wrap "sufficiently file-like objects" (ie those with readline())
    or any iterable of lines in an iterator which counts line numbers,
    strips newlines, decodes bytes, and raises StopIteration at EOF.

    fileread never opens or closes anything by itself except in close();
    the stream belongs to the caller.
    '''
    encoding = 'latin-1'

    def __new__(cls, file):
        if isinstance(file, fileread):
            return file
        fr = object.__new__(cls)
        if isinstance(file, (str, bytes)):
            raise ValueError('fileread needs a stream or lines, not a filename; '
                             'open the file first.')
        elif hasattr(file, 'readline'):
            fr.fid = file
            fr.readfn = file.readline
            fr.stream = True
        elif hasattr(file, '__iter__'):
            fr.fid = file
            it = iter(file)
            fr.readfn = lambda: next(it, None)
            fr.stream = False
        else:
            raise ValueError("Input of type " + str(type(file)) +
                             " is not supported.")
        fr.name = getattr(file, 'name', None)
        fr.lineno = 0
        return fr

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def next(self):
        '''Return the next line, also incrementing `lineno'.'''
        line = self.readfn()
        # readline() gives '' at EOF; an empty item from a list is a blank line
        if line is None or (self.stream and not line):
            raise StopIteration()
        self.lineno += 1
        if isinstance(line, bytes):
            line = line.decode(self.encoding)
        return line.rstrip('\r\n')

    __next__ = next

    def __iter__(self):
        return self

    def close(self):
        '''Close the underlying file, if it can be closed.'''
        if hasattr(self.fid, 'fileno'):
            with suppress(OSError, ValueError):
                if self.fid.fileno() < 3:
                    # Closing stdin, stdout, stderr can be bad
                    return
        if hasattr(self.fid, 'close'):
            with suppress(OSError, EOFError):
                self.fid.close()
