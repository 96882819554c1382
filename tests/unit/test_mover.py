import io
import os
import shutil
import tempfile
import time
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import patch

from disktools.config import MoveConfig
from disktools.mover import MoveError, date_dir_for, list_directory_files, move_files_to_date, move_to_date

# 2024-03-15 12:00:00 UTC; far enough from a month boundary for any timezone
MTIME = 1710504000


class TestMover(unittest.TestCase):
    def setUp(self):
        self.test_dir = Path(tempfile.mkdtemp())
        self.src = self.test_dir / "notes.txt"
        self.src.write_text("hello")
        os.utime(self.src, (MTIME, MTIME))
        self.expected_dir = time.strftime("%Y%m", time.localtime(MTIME))

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_date_dir_for_uses_modification_time(self):
        self.assertEqual(date_dir_for(str(self.src)), "202403")
        self.assertEqual(date_dir_for(str(self.src), "%Y-%m"), "2024-03")

    def test_empty_format_is_rejected(self):
        with self.assertRaises(MoveError) as cm:
            date_dir_for(str(self.src), "")
        self.assertIn("bad format", str(cm.exception))

    @patch("disktools.mover.get_exif_date", return_value="2020-05-17T10:00:00")
    def test_exif_date_wins_for_images(self, mock_exif):
        photo = self.test_dir / "IMG_0001.JPG"
        photo.write_bytes(b"fake")
        os.utime(photo, (MTIME, MTIME))

        self.assertEqual(date_dir_for(str(photo), use_exif=True), "202005")
        self.assertEqual(date_dir_for(str(photo), use_exif=False), self.expected_dir)

    @patch("disktools.mover.get_exif_date")
    def test_placeholder_exif_date_falls_back_to_modification_time(self, mock_exif):
        photo = self.test_dir / "IMG_0002.jpg"
        photo.write_bytes(b"fake")
        os.utime(photo, (MTIME, MTIME))

        for placeholder in ("0000-00-00T00:00:00", "    -  -  T  :  :  "):
            mock_exif.return_value = placeholder
            self.assertEqual(date_dir_for(str(photo), use_exif=True), self.expected_dir)

    @patch("disktools.mover.get_exif_date", return_value=None)
    def test_exif_falls_back_to_modification_time(self, mock_exif):
        photo = self.test_dir / "scan.png"
        photo.write_bytes(b"fake")
        os.utime(photo, (MTIME, MTIME))

        self.assertEqual(date_dir_for(str(photo), use_exif=True), self.expected_dir)

    @patch("disktools.mover.get_exif_date")
    def test_exif_is_not_read_for_other_files(self, mock_exif):
        date_dir_for(str(self.src), use_exif=True)
        mock_exif.assert_not_called()

    def test_move_to_date(self):
        dest = self.test_dir / "sorted"
        target = move_to_date(str(self.src), dest_root=str(dest))

        self.assertEqual(target, dest / self.expected_dir / "notes.txt")
        self.assertTrue(target.exists())
        self.assertFalse(self.src.exists())
        self.assertEqual(target.read_text(), "hello")

    def test_existing_date_directory_is_reused(self):
        dest = self.test_dir / "sorted"
        (dest / self.expected_dir).mkdir(parents=True)
        (dest / self.expected_dir / "other.txt").write_text("x")

        target = move_to_date(str(self.src), dest_root=str(dest))
        self.assertTrue(target.exists())
        self.assertTrue((dest / self.expected_dir / "other.txt").exists())

    def test_dry_run_moves_nothing(self):
        dest = self.test_dir / "sorted"
        target = move_to_date(str(self.src), dest_root=str(dest), dry_run=True)

        self.assertEqual(target, dest / self.expected_dir / "notes.txt")
        self.assertTrue(self.src.exists())
        self.assertFalse(dest.exists())

    def test_refuses_to_overwrite(self):
        dest = self.test_dir / "sorted"
        (dest / self.expected_dir).mkdir(parents=True)
        (dest / self.expected_dir / "notes.txt").write_text("keep me")

        with self.assertRaises(MoveError) as cm:
            move_to_date(str(self.src), dest_root=str(dest))

        self.assertIn("destination exists", str(cm.exception))
        self.assertTrue(self.src.exists())
        self.assertEqual((dest / self.expected_dir / "notes.txt").read_text(), "keep me")

    def test_missing_source(self):
        with self.assertRaises(MoveError) as cm:
            move_to_date(str(self.test_dir / "missing.txt"))
        self.assertIn("stat(", str(cm.exception))

    def test_symlink_to_regular_file_is_moved(self):
        link = self.test_dir / "link.txt"
        os.symlink(self.src, link)
        dest = self.test_dir / "sorted"

        target = move_to_date(str(link), dest_root=str(dest))

        self.assertEqual(target, dest / self.expected_dir / "link.txt")
        self.assertTrue(target.is_symlink())
        self.assertFalse(os.path.lexists(link))
        self.assertEqual(target.read_text(), "hello")

    def test_dangling_symlink_is_rejected(self):
        link = self.test_dir / "dangling.txt"
        os.symlink(self.test_dir / "gone.txt", link)

        with self.assertRaises(MoveError) as cm:
            move_to_date(str(link), dest_root=str(self.test_dir / "sorted"))
        self.assertIn("stat", str(cm.exception))

    def test_directory_is_not_a_regular_file(self):
        with self.assertRaises(MoveError):
            move_to_date(str(self.test_dir), dest_root=str(self.test_dir / "sorted"))

    def test_list_directory_files(self):
        (self.test_dir / "b.txt").write_text("b")
        (self.test_dir / "a.txt").write_text("a")
        (self.test_dir / "subdir").mkdir()

        files = list_directory_files(str(self.test_dir))
        self.assertEqual(files, [
            str(self.test_dir / "a.txt"),
            str(self.test_dir / "b.txt"),
            str(self.test_dir / "notes.txt"),
        ])

    def test_list_missing_directory(self):
        with self.assertRaises(MoveError):
            list_directory_files(str(self.test_dir / "nope"))

    def test_move_files_to_date(self):
        other = self.test_dir / "todo.txt"
        other.write_text("x")
        os.utime(other, (MTIME, MTIME))
        dest = self.test_dir / "sorted"

        moved = move_files_to_date([str(self.src), str(other)], MoveConfig(dest_root=str(dest)))

        self.assertEqual([src for src, _ in moved], [str(self.src), str(other)])
        self.assertTrue((dest / self.expected_dir / "todo.txt").exists())

    def test_move_files_to_date_dry_run_reports(self):
        out = io.StringIO()
        with redirect_stdout(out):
            move_files_to_date([str(self.src)], MoveConfig(dest_root="sorted", dry_run=True))

        self.assertIn("[WOULD MOVE]", out.getvalue())
        self.assertTrue(self.src.exists())

    def test_move_files_to_date_stops_at_first_failure(self):
        dest = self.test_dir / "sorted"
        later = self.test_dir / "later.txt"
        later.write_text("x")

        with self.assertRaises(MoveError):
            move_files_to_date([str(self.test_dir / "missing"), str(later)], MoveConfig(dest_root=str(dest)))
        self.assertTrue(later.exists())


if __name__ == "__main__":
    unittest.main()
