"""TreeReshaper: merges the starter and CMS web roots into the final layout.

Starting point, after both initializers ran in the target directory:

    www/            static-site starter web root (index.html, css/, ...)
    craft/web/      Craft CMS web root (index.php, .htaccess, web.config, ...)

End result:

    www/            CMS web root plus every starter asset except index.html
    .gitignore      bundled template
"""

import os
import shutil
from concurrent.futures import ThreadPoolExecutor

from craftsite.errors import FileOperationError
from craftsite.template_renderer import read_template, template_path
from craftsite.text_patcher import append_to_file, patch_file

WEB_ROOT = "www"
STARTER_TEMP_ROOT = "www-starter"
CMS_WEB_ROOT = os.path.join("craft", "web")
STARTER_ENTRY_PAGE = "index.html"
IGNORE_TEMPLATE = "gitignore"
IGNORE_FILE = ".gitignore"
SERVER_CONFIG_FILE = "web.config"
ACCESS_FILE = ".htaccess"
HEADERS_TEMPLATE = "htaccess-headers"
ENTRY_FILE = "index.php"
ENTRY_REPLACEMENTS = {"dirname(__DIR__)": "'../craft'"}


class TreeReshaper:
    """Performs the ordered directory moves for one target directory."""

    def __init__(self, target_dir: str):
        self._target_dir = target_dir

    def _path(self, *parts):
        return os.path.join(self._target_dir, *parts)

    def reshape(self):
        """Run every step in order; the first failure aborts the rest."""
        self.park_starter_web_root()
        self.promote_cms_web_root()
        self.install_ignore_file()
        self.merge_starter_assets()
        self.remove_starter_temp_root()
        self.finish_web_root()

    def park_starter_web_root(self):
        """Step 1; a no-op once the starter root has been parked."""
        src = self._path(WEB_ROOT)
        dest = self._path(STARTER_TEMP_ROOT)
        if os.path.isdir(dest):
            return
        if not os.path.isdir(src):
            raise FileOperationError(f"Starter web root not found: {src}", path=src)
        _move(src, dest)

    def promote_cms_web_root(self):
        """Step 2; a no-op once the CMS root has taken the web root's place."""
        src = self._path(CMS_WEB_ROOT)
        if not os.path.isdir(src):
            if os.path.isdir(self._path(WEB_ROOT)):
                return
            raise FileOperationError(f"CMS web root not found: {src}", path=src)
        _move(src, self._path(WEB_ROOT))

    def install_ignore_file(self):
        dest = self._path(IGNORE_FILE)
        try:
            shutil.copyfile(template_path(IGNORE_TEMPLATE), dest)
        except OSError as exc:
            raise FileOperationError(f"Could not write {dest}: {exc}", path=dest) from exc

    def merge_starter_assets(self):
        """Move the starter's assets into the web root.

        Only the exact name index.html is left behind; colliding files are
        replaced and colliding directories merged. A file colliding with a
        directory raises FileOperationError.
        """
        temp_root = self._path(STARTER_TEMP_ROOT)
        web_root = self._path(WEB_ROOT)
        try:
            children = sorted(os.listdir(temp_root))
        except OSError as exc:
            raise FileOperationError(f"Could not list {temp_root}: {exc}", path=temp_root) from exc
        for name in children:
            if name == STARTER_ENTRY_PAGE:
                continue
            _merge_into(os.path.join(temp_root, name), os.path.join(web_root, name))

    def remove_starter_temp_root(self):
        temp_root = self._path(STARTER_TEMP_ROOT)
        try:
            shutil.rmtree(temp_root)
        except OSError as exc:
            raise FileOperationError(f"Could not remove {temp_root}: {exc}", path=temp_root) from exc

    def finish_web_root(self):
        """Run the three independent web-root edits concurrently."""
        steps = [self.remove_server_config, self.append_security_headers, self.patch_entry_file]
        with ThreadPoolExecutor(max_workers=len(steps)) as pool:
            futures = [pool.submit(step) for step in steps]
        for future in futures:
            exc = future.exception()
            if exc is not None:
                raise exc

    def remove_server_config(self):
        path = self._path(WEB_ROOT, SERVER_CONFIG_FILE)
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise FileOperationError(f"Could not remove {path}: {exc}", path=path) from exc

    def append_security_headers(self):
        append_to_file(self._path(WEB_ROOT, ACCESS_FILE), read_template(HEADERS_TEMPLATE))

    def patch_entry_file(self):
        patch_file(self._path(WEB_ROOT, ENTRY_FILE), ENTRY_REPLACEMENTS)


def _remove(path):
    if _is_dir(path):
        shutil.rmtree(path)
    else:
        os.remove(path)


def _move(src, dest):
    """Move *src* to *dest*, replacing whatever is at *dest*."""
    try:
        if os.path.lexists(dest):
            _remove(dest)
        shutil.move(src, dest)
    except OSError as exc:
        raise FileOperationError(f"Could not move {src} to {dest}: {exc}", path=src) from exc


def _is_dir(path):
    return os.path.isdir(path) and not os.path.islink(path)


def _merge_into(src, dest):
    if not os.path.lexists(dest):
        _move(src, dest)
        return
    if _is_dir(src) != _is_dir(dest):
        raise FileOperationError(
            f"Cannot merge {src} into {dest}: one is a directory and the other is not",
            path=src,
        )
    if _is_dir(src):
        for name in sorted(os.listdir(src)):
            _merge_into(os.path.join(src, name), os.path.join(dest, name))
        return
    _move(src, dest)
