import os
import shutil
import logging


class SiteWriter:
    """Owns the output directory: clears it, writes pages, copies static files."""

    def __init__(self, output_dir):
        self.output_dir = output_dir
        self.logger = logging.getLogger('TopicPress')
        self.files_written = 0

    def clear(self):
        """Remove everything from a previous build and recreate the directory."""
        if os.path.exists(self.output_dir):
            shutil.rmtree(self.output_dir)
        os.makedirs(self.output_dir, exist_ok=True)
        self.logger.debug(f"Cleared output directory {self.output_dir}")

    def write_page(self, relative_path, contents):
        output_file_path = os.path.join(self.output_dir, relative_path)
        os.makedirs(os.path.dirname(output_file_path), exist_ok=True)
        with open(output_file_path, 'w', encoding='utf-8') as output_file:
            output_file.write(contents)
        self.files_written += 1
        self.logger.debug(f"Generated HTML: {output_file_path}")
        return output_file_path

    def copy_static(self, static_dir):
        """Copy every file under static_dir into the output root, byte for byte."""
        if not static_dir or not os.path.isdir(static_dir):
            self.logger.debug(f"No static directory at {static_dir}, skipping")
            return 0

        copied = 0
        for root, dirs, files in os.walk(static_dir):
            dirs.sort()
            for name in sorted(files):
                source = os.path.join(root, name)
                destination = os.path.join(self.output_dir, os.path.relpath(source, static_dir))
                os.makedirs(os.path.dirname(destination), exist_ok=True)
                shutil.copyfile(source, destination)
                copied += 1
        self.logger.info(f"Copied {copied} static files from {static_dir}")
        return copied
