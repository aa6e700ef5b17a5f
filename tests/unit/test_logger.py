import logging

from core.utils.logger import setup_logging


class TestSetupLogging:
    """Test cases for logging setup."""

    def setup_method(self):
        self.root = logging.getLogger()
        self.level = self.root.level
        self.handlers = list(self.root.handlers)

    def teardown_method(self):
        for handler in list(self.root.handlers):
            if handler not in self.handlers:
                handler.close()
                self.root.removeHandler(handler)
        self.root.setLevel(self.level)

    def test_log_file_written_under_logs(self, tmp_path, monkeypatch):
        """A log file is added next to any existing handlers."""
        monkeypatch.chdir(tmp_path)

        setup_logging("DEBUG", "ami.log")
        logging.getLogger("core.test").info("AMI ami-1 creation started")
        for handler in self.root.handlers:
            handler.flush()

        assert self.root.level == logging.DEBUG
        log_text = (tmp_path / "logs" / "ami.log").read_text()
        assert "core.test - INFO - AMI ami-1 creation started" in log_text

    def test_invalid_level_falls_back_to_info(self):
        setup_logging("VERBOSE")

        assert self.root.level == logging.INFO
