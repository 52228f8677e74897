import pytest

from exifgraft import ExifOptions, copy_exif, parse_exif_data
from exifgraft.exceptions import FileAccessError, NoExifError, NoJpegError
from exifgraft.jpeg_modifier import JPEGModifier, extract_exif_segment, graft_exif_segment, transplant_exif
from exifgraft.jpeg_scanner import locate_exif_segment

from jpeg_builder import (
    JFIF_SEGMENT,
    SOI,
    TiffBuilder,
    add_gps,
    build_jpeg,
    exif_segment,
    icc_segment,
    sample_tiff,
    xmp_segment,
)


def _dest_tiff() -> TiffBuilder:
    tiff = TiffBuilder('MM')
    tiff.add_ascii(tiff.ifd0, 0x010F, 'ImageMagick')
    tiff.add_short(tiff.ifd0, 0x0112, 1)
    return tiff


@pytest.fixture
def source_segment():
    return exif_segment(add_gps(sample_tiff()).build())


@pytest.fixture
def source_file(tmp_path, source_segment):
    path = tmp_path / 'original.jpg'
    path.write_bytes(build_jpeg(JFIF_SEGMENT, source_segment))
    return path


def test_copy_replaces_destination_exif(tmp_path, source_file, source_segment):
    old_segment = exif_segment(_dest_tiff().build())
    dest_before = build_jpeg(old_segment, JFIF_SEGMENT)
    dest = tmp_path / 'resized.jpg'
    dest.write_bytes(dest_before)

    assert copy_exif(source_file, dest) is True

    dest_after = dest.read_bytes()
    start, length = locate_exif_segment(dest_after)
    assert start == 2
    assert dest_after[start:start + length] == source_segment
    # Everything after the new segment is the old file minus SOI and its EXIF segment
    assert dest_after[start + length:] == dest_before[2 + len(old_segment):]

    info = parse_exif_data(dest)
    assert info.make == 'Canon'
    assert info.geo_location.valid


def test_copy_into_destination_without_exif(tmp_path, source_file, source_segment):
    dest_before = build_jpeg(JFIF_SEGMENT)
    dest = tmp_path / 'plain.jpg'
    dest.write_bytes(dest_before)

    assert copy_exif(str(source_file), str(dest))
    assert dest.read_bytes() == SOI + source_segment + dest_before[2:]


def test_copy_keeps_xmp_segment(tmp_path, source_file, source_segment):
    xmp = xmp_segment()
    old_segment = exif_segment(_dest_tiff().build())
    dest = tmp_path / 'edited.jpg'
    dest.write_bytes(build_jpeg(xmp, old_segment))

    assert copy_exif(source_file, dest)
    assert dest.read_bytes() == build_jpeg(source_segment, xmp)


def test_copy_from_file_without_exif_writes_nothing(tmp_path):
    source = tmp_path / 'noexif.jpg'
    source.write_bytes(build_jpeg(JFIF_SEGMENT))
    dest_before = build_jpeg(exif_segment(_dest_tiff().build()))
    dest = tmp_path / 'dest.jpg'
    dest.write_bytes(dest_before)

    assert copy_exif(source, dest) is False
    assert dest.read_bytes() == dest_before
    with pytest.raises(NoExifError):
        transplant_exif(source, dest)


def test_copy_with_missing_files(tmp_path, source_file):
    dest = tmp_path / 'dest.jpg'
    dest.write_bytes(build_jpeg(JFIF_SEGMENT))

    assert copy_exif(tmp_path / 'missing.jpg', dest) is False
    assert copy_exif(source_file, tmp_path / 'missing.jpg') is False
    assert not (tmp_path / 'missing.jpg').exists()
    with pytest.raises(FileAccessError):
        transplant_exif(source_file, tmp_path / 'missing.jpg')


def test_copy_into_non_jpeg_writes_nothing(tmp_path, source_file):
    dest = tmp_path / 'notes.txt'
    dest.write_bytes(b'just some text, not an image')

    assert copy_exif(source_file, dest) is False
    assert dest.read_bytes() == b'just some text, not an image'
    with pytest.raises(NoJpegError):
        transplant_exif(source_file, dest)


def test_copy_respects_size_limit(tmp_path, source_file):
    dest_before = build_jpeg(JFIF_SEGMENT)
    dest = tmp_path / 'dest.jpg'
    dest.write_bytes(dest_before)

    options = ExifOptions(max_file_size=len(dest_before))
    assert copy_exif(source_file, dest, options) is False
    assert dest.read_bytes() == dest_before


@pytest.mark.parametrize('atomic', [True, False])
def test_copy_leaves_no_temporary_files(tmp_path, source_file, atomic):
    dest = tmp_path / 'dest.jpg'
    dest.write_bytes(build_jpeg(JFIF_SEGMENT))

    assert copy_exif(source_file, dest, ExifOptions(atomic_write=atomic))
    assert sorted(p.name for p in tmp_path.iterdir()) == ['dest.jpg', 'original.jpg']
    assert parse_exif_data(dest).model == 'Canon EOS 5D Mark IV'


def test_copy_onto_itself_moves_exif_after_soi(source_file, source_segment):
    assert copy_exif(source_file, source_file)
    assert source_file.read_bytes() == build_jpeg(source_segment, JFIF_SEGMENT)


def test_graft_exif_segment_in_memory(source_segment):
    source = build_jpeg(source_segment)
    dest = build_jpeg(JFIF_SEGMENT)
    assert graft_exif_segment(source, dest) == SOI + source_segment + dest[2:]


def test_extract_exif_segment_requires_exif_header():
    data = build_jpeg(xmp_segment())
    with pytest.raises(NoExifError):
        extract_exif_segment(data)


def test_modifier_finds_exif_segment_after_xmp():
    old_segment = exif_segment(_dest_tiff().build())
    data = build_jpeg(JFIF_SEGMENT, xmp_segment(), old_segment)
    modifier = JPEGModifier(data)

    found = modifier.find_exif_segment()
    assert found is not None
    assert data[found.offset:found.end] == old_segment
    assert JPEGModifier(build_jpeg(JFIF_SEGMENT)).find_exif_segment() is None


def test_copy_into_destination_with_icc_profile(tmp_path, source_file, source_segment):
    # Profile bytes that look like an SOF0 header with an impossible length
    icc = icc_segment(b'\x00\x00\x02\x30\xff\xc0\xff\xff\x00\x01')
    dest_before = build_jpeg(JFIF_SEGMENT, icc)
    dest = tmp_path / 'profiled.jpg'
    dest.write_bytes(dest_before)

    assert copy_exif(source_file, dest)
    assert dest.read_bytes() == SOI + source_segment + dest_before[2:]


def test_copy_replaces_exif_behind_icc_profile(tmp_path, source_file, source_segment):
    # An EOI-like pair inside the profile must not hide the old EXIF segment
    icc = icc_segment(b'\x00\x00\xff\xd9\x00\x00')
    old_segment = exif_segment(_dest_tiff().build())
    dest = tmp_path / 'profiled.jpg'
    dest.write_bytes(build_jpeg(JFIF_SEGMENT, icc, old_segment))

    assert copy_exif(source_file, dest)
    dest_after = dest.read_bytes()
    assert dest_after.count(b'Exif\x00\x00') == 1
    assert dest_after == build_jpeg(source_segment, JFIF_SEGMENT, icc)


def test_copy_to_unusable_path(source_file):
    assert copy_exif(source_file, 'bad\x00name.jpg') is False
    with pytest.raises(FileAccessError):
        transplant_exif(source_file, 'bad\x00name.jpg')
