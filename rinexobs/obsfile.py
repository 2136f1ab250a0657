'''
RINEX observation files on disk.

ObsFile(path) knows the parts of a standard file name, opens plain, gzipped
and compress'd files, and runs the decoding core on them: stat(), diff()
against another file, and conversion to and from Hatanaka compression.
'''

import gzip
import io
import shutil
import tempfile
from contextlib import contextmanager
from warnings import warn

from . import diff as rnxdiff
from . import stats
from .errors import RinexWarning
from .filename import RnxFil, parse_filename, rnx3_filename, data_freq
from .hatanaka import HatanakaTool, ToolError, gzip_file, gunzip_file
from .rinex import open_decoder
from .utility import decompress

ENCODING = 'latin-1'


class ObsFile(RnxFil):
    '''A RINEX observation file.'''
    def __init__(self, filepath, opts=None, tool=None):
        RnxFil.__init__(self, filepath)
        self.opts = rnxdiff.DiffOptions() if opts is None else opts
        self.tool = HatanakaTool() if tool is None else tool
        self.standard_name = True
        try:
            parse_filename(filepath, self)
        except ValueError as err:
            self.standard_name = False
            if filepath.endswith('.gz'):
                self.compression = 'gz'
            elif filepath.endswith('.Z'):
                self.compression = 'Z'
            warn(str(err), RinexWarning)

    def is_hatanaka_compressed(self):
        return self.format == 'crx'

    def open(self):
        '''Open the file for reading as text, uncompressing if necessary.'''
        if self.is_hatanaka_compressed():
            raise ToolError(self.path + ' is Hatanaka compressed; decompress() it first.')
        if self.compression == 'Z':
            return self.open_z()
        if self.compression == 'gz':
            return gzip.open(self.path, 'rt', encoding=ENCODING)
        return open(self.path, encoding=ENCODING)

    def open_z(self):
        '''Read a compress'd file through a decompressed copy made in a
        temporary directory; the file itself is left as it is.'''
        with tempfile.TemporaryDirectory() as tmpdir:
            copy = shutil.copy(self.path, tmpdir)
            with open(decompress(copy), encoding=ENCODING) as fid:
                return io.StringIO(fid.read())

    @contextmanager
    def decoder(self):
        '''Context manager giving an ObsDecoder on the open file.

        The header is read, so a file without a valid header raises here.
        '''
        with self.open() as fid:
            yield open_decoder(fid)

    def header(self):
        with self.decoder() as dec:
            return dec.header

    def stat(self):
        '''Gather some observation statistics; see stats.collect.'''
        with self.decoder() as dec:
            return stats.collect(dec)

    def diff(self, other, report=None):
        '''Compare with another ObsFile, using this file's options.

        Returns (number of common epochs, list of Discrepancy).
        '''
        with self.decoder() as dec, other.decoder() as dec2:
            return rnxdiff.diff(dec, dec2, self.opts, report)

    def compress(self):
        '''Compress using Hatanaka first and then gzip.

        The source file is removed if the compression finishes without errors.
        '''
        if self.format == 'crx' and self.compression == 'gz':
            return self.path
        if self.format == 'rnx' and self.compression:
            raise ToolError('compressed file is not Hatanaka compressed: ' + self.path)
        if self.format == 'rnx':
            self.path = self.tool.rnx2crx(self.path)
            self.format = 'crx'
        self.path = gzip_file(self.path)
        self.compression = 'gz'
        return self.path

    def decompress(self):
        '''Undo gzip (or compress) and Hatanaka compression; return the new path.'''
        if self.compression == 'gz':
            self.path = gunzip_file(self.path)
        elif self.compression == 'Z':
            self.path = decompress(self.path)
        self.compression = ''
        if self.is_hatanaka_compressed():
            self.path = self.tool.crx2rnx(self.path)
            self.format = 'rnx'
        return self.path

    def rnx3_filename(self):
        '''The RINEX 3 long name for this file.

        Sampling and data type are read from the header if the name didn't
        give them; the country code must have been set.
        '''
        if not self.data_freq or not self.data_type or self.start_time is None:
            hdr = self.header()
            if not self.data_freq and hdr.interval:
                self.data_freq = data_freq(hdr.interval)
            if hdr.sat_system is not None:
                self.data_type = hdr.sat_system.abbr + 'O'
            if self.start_time is None:
                self.start_time = hdr.time_of_first_obs
        return rnx3_filename(self)

