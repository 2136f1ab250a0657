'''
Hatanaka (Compact RINEX) compression through the external programs
CRX2RNX and RNX2CRX (Yuki HATANAKA, Geospatial Information Authority of Japan,
see https://terras.gsi.go.jp/ja/crx2rnx.html).

A HatanakaTool transforms a file on disk and returns the path of the new
file, or raises ToolError; the decoder itself never sees compressed data.
'''

import gzip
import os
import shutil
import subprocess

from .filename import compressed_name, uncompressed_name


class ToolError(RuntimeError):
    '''An external program is missing or failed.'''


def findtool(name):
    '''Full path of the program `name', or ToolError.'''
    tool = shutil.which(name)
    if tool is None:
        raise ToolError('program ' + name + ' not found in PATH')
    return tool


def runtool(tool, filepath, target):
    '''Run the converter on filepath; it must produce `target'.

    The converters write next to their input; -f overwrites an existing
    output file, -d deletes the input file on success.
    '''
    cmd = [tool, filepath, '-d', '-f']
    try:
        subprocess.run(cmd, check=True, stdout=subprocess.DEVNULL,
                       stderr=subprocess.PIPE)
    except subprocess.CalledProcessError as err:
        stderr = err.stderr.decode('ascii', 'replace').strip() if err.stderr else ''
        raise ToolError("cmd '" + ' '.join(cmd) + "' failed: " + str(err)
                        + (': ' + stderr if stderr else '')) from err
    except OSError as err:
        raise ToolError("cmd '" + ' '.join(cmd) + "' failed: " + str(err)) from err
    if not os.path.isfile(target):
        raise ToolError('converted file does not exist: ' + target)
    return target


class HatanakaTool(object):
    '''Convert between standard and Compact RINEX with the external programs.'''
    def __init__(self, crx2rnx='CRX2RNX', rnx2crx='RNX2CRX'):
        self.crx2rnx_name = crx2rnx
        self.rnx2crx_name = rnx2crx

    def crx2rnx(self, filepath):
        '''Decompress a Hatanaka-compressed file; return the new file path.'''
        target = uncompressed_name(filepath)
        return runtool(findtool(self.crx2rnx_name), filepath, target)

    def rnx2crx(self, filepath):
        '''Hatanaka-compress a RINEX observation file; return the new file path.'''
        target = compressed_name(filepath)
        return runtool(findtool(self.rnx2crx_name), filepath, target)


def gzip_file(filepath, remove=True):
    '''Gzip filepath to filepath.gz, removing the original unless told not to.'''
    target = filepath + '.gz'
    with open(filepath, 'rb') as src, gzip.open(target, 'wb') as dst:
        shutil.copyfileobj(src, dst)
    if remove:
        os.remove(filepath)
    return target


def gunzip_file(filepath, remove=True):
    '''Gunzip filepath (ending in .gz), returning the path without .gz.'''
    if not filepath.endswith('.gz'):
        raise ValueError('Given filename ' + filepath + ' does not end with .gz.')
    target = filepath[:-3]
    with gzip.open(filepath, 'rb') as src, open(target, 'wb') as dst:
        shutil.copyfileobj(src, dst)
    if remove:
        os.remove(filepath)
    return target
