import gzip
import os
import shutil

import pytest

from conftest import obsfile_lines, T0
from rinexobs.errors import RinexWarning, GrammarError
from rinexobs.filename import compressed_name, uncompressed_name
from rinexobs.hatanaka import ToolError
from rinexobs import obsfile
from rinexobs.obsfile import ObsFile


class CopyTool(object):
    '''Stands in for the Hatanaka programs: renames and keeps the content.'''
    def __init__(self):
        self.calls = []

    def rnx2crx(self, filepath):
        self.calls.append('rnx2crx')
        target = compressed_name(filepath)
        shutil.move(filepath, target)
        return target

    def crx2rnx(self, filepath):
        self.calls.append('crx2rnx')
        target = uncompressed_name(filepath)
        shutil.move(filepath, target)
        return target


def test_standard_name(rinex_path):
    fil = ObsFile(str(rinex_path))
    assert fil.standard_name
    assert fil.four_char_id == 'BRUX'
    assert fil.start_time == T0


def test_nonstandard_name_warns(tmp_path, rinex_text):
    path = tmp_path / 'mydata.obs'
    path.write_text(rinex_text)
    with pytest.warns(RinexWarning, match='no standard RINEX name'):
        fil = ObsFile(str(path))
    assert not fil.standard_name
    assert fil.stat().num_epochs == 3


def test_header_and_stat(rinex_path):
    fil = ObsFile(str(rinex_path))
    assert fil.header().marker_name == 'BRUX'
    stat = fil.stat()
    assert stat.num_epochs == 3
    assert stat.sampling == 30.


def test_gzipped(tmp_path, rinex_text):
    path = tmp_path / 'BRUX00BEL_R_20183101900_01H_30S_MO.rnx.gz'
    with gzip.open(str(path), 'wt', encoding='latin-1') as fid:
        fid.write(rinex_text)
    fil = ObsFile(str(path))
    assert fil.compression == 'gz'
    assert fil.stat().num_epochs == 3


def test_decoder_closes_file(rinex_path):
    fil = ObsFile(str(rinex_path))
    with fil.decoder() as dec:
        epochs = list(dec)
        fid = dec.fid.fid
    assert len(epochs) == 3
    assert fid.closed


def test_corrupt_file(tmp_path):
    path = tmp_path / 'BRUX00BEL_R_20183101900_01H_30S_MO.rnx'
    path.write_text('\n'.join(obsfile_lines()[:-1]) + '\n')
    with pytest.raises(GrammarError):
        ObsFile(str(path)).stat()


def test_diff(tmp_path, rinex_path):
    other = tmp_path / 'BRUX00BEL_S_20183101900_01H_30S_MO.rnx'
    other.write_text('\n'.join(obsfile_lines(base=0.01)) + '\n')
    nsync, found = ObsFile(str(rinex_path)).diff(ObsFile(str(other)))
    assert nsync == 3
    assert len(found) == 18


def test_hatanaka_file_must_be_decompressed(tmp_path, rinex_text):
    path = tmp_path / 'BRUX00BEL_R_20183101900_01H_30S_MO.crx'
    path.write_text(rinex_text)
    with pytest.raises(ToolError, match='decompress'):
        ObsFile(str(path)).stat()


def test_compress_and_decompress(rinex_path):
    tool = CopyTool()
    fil = ObsFile(str(rinex_path), tool=tool)
    path = fil.compress()
    assert path.endswith('_MO.crx.gz')
    assert os.path.exists(path)
    assert not rinex_path.exists()
    assert fil.compress() == path
    path = fil.decompress()
    assert path == str(rinex_path)
    assert tool.calls == ['rnx2crx', 'crx2rnx']
    assert fil.stat().num_epochs == 3


def test_compress_refuses_other_compression(tmp_path, rinex_text):
    path = tmp_path / 'BRUX00BEL_R_20183101900_01H_30S_MO.rnx.gz'
    with gzip.open(str(path), 'wt') as fid:
        fid.write(rinex_text)
    with pytest.raises(ToolError):
        ObsFile(str(path), tool=CopyTool()).compress()


def test_rnx3_filename_from_header(tmp_path, rinex_text):
    path = tmp_path / 'brux3100.18o'
    path.write_text(rinex_text)
    fil = ObsFile(str(path))
    fil.country_code = 'BEL'
    assert fil.rnx3_filename() == 'BRUX00BEL_U_20183100000_01D_30S_MO.rnx'


def test_z_file_is_left_alone(tmp_path, rinex_text, monkeypatch):
    calls = []

    def uncompress(filename):
        # stands in for the external program: replaces name.Z by name
        calls.append(filename)
        target = filename[:-2]
        with gzip.open(filename, 'rb') as src, open(target, 'wb') as dst:
            dst.write(src.read())
        os.remove(filename)
        return target

    monkeypatch.setattr(obsfile, 'decompress', uncompress)
    path = tmp_path / 'brux3100.18o.Z'
    with gzip.open(str(path), 'wt', encoding='latin-1') as fid:
        fid.write(rinex_text)
    data = path.read_bytes()
    fil = ObsFile(str(path))
    assert fil.compression == 'Z'
    assert fil.stat().num_epochs == 3
    assert fil.header().marker_name == 'BRUX'
    assert fil.path == str(path)
    assert fil.compression == 'Z'
    assert path.read_bytes() == data
    assert sorted(p.name for p in tmp_path.iterdir()) == ['brux3100.18o.Z']
    assert len(calls) == 2
    assert all(not call.startswith(str(tmp_path)) for call in calls)
