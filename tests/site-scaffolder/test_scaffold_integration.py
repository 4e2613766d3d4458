"""End-to-end scaffold run with real file operations.

npm, composer and unzip are replaced by side effects that lay out what the
real tools produce; the HTTP session serves an in-memory zip behind a
redirect.
"""

import io
import os
import zipfile

import pytest

from craftsite.bucket_provisioner import BucketProvisioner
from craftsite.file_transfer import FileTransfer
from craftsite.scripts_installer import ScriptsInstaller
from craftsite.site_opts import SiteOpts
from craftsite.site_scaffolder import ScaffolderDeps, SiteScaffolder
from craftsite.tree_reshaper import TreeReshaper

from fake_command_runner import FakeCommandRunner

BUNDLE_URL = "https://github.com/nystudio107/craft-scripts/archive/master.zip"
CODELOAD_URL = "https://codeload.github.com/nystudio107/craft-scripts/zip/master"


def _bundle_bytes():
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        zf.writestr("craft-scripts-master/README.md", "# craft-scripts\n")
        zf.writestr("craft-scripts-master/scripts/pull_db.sh", "#!/bin/bash\n")
        zf.writestr("craft-scripts-master/scripts/common/defaults.sh", "#!/bin/bash\n")
    return buffer.getvalue()


class _Response:

    def __init__(self, status_code, headers=None, body=b""):
        self.status_code = status_code
        self.headers = headers or {}
        self._body = body

    def iter_content(self, chunk_size=1):
        for start in range(0, len(self._body), chunk_size):
            yield self._body[start:start + chunk_size]

    def close(self):
        pass


class _GitHubSession:

    def get(self, url, **kwargs):
        if url == BUNDLE_URL:
            return _Response(302, headers={"Location": CODELOAD_URL})
        if url == CODELOAD_URL:
            return _Response(200, body=_bundle_bytes())
        return _Response(404)


def _write(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w") as f:
        f.write(content)


def _npm_init(_command, cwd):
    _write(os.path.join(cwd, "package.json"), '{"name": "my-site"}\n')
    _write(os.path.join(cwd, "www", "index.html"), "<h1>placeholder</h1>\n")
    _write(os.path.join(cwd, "www", "css", "main.css"), "body {}\n")
    _write(os.path.join(cwd, ".gitignore"), "node_modules\n")


def _composer_create_project(_command, cwd):
    craft = os.path.join(cwd, "craft")
    _write(os.path.join(craft, "composer.json"), "{}\n")
    _write(os.path.join(craft, "web", "index.php"),
           "<?php\ndefine('CRAFT_BASE_PATH', dirname(__DIR__));\n")
    _write(os.path.join(craft, "web", ".htaccess"), "RewriteEngine On\n")
    _write(os.path.join(craft, "web", "web.config"), "<configuration/>\n")
    _write(os.path.join(craft, "web", "cpresources", ".gitkeep"), "")


def _unzip(command, _cwd):
    archive, dest = command[3], command[5]
    with zipfile.ZipFile(archive) as zf:
        zf.extractall(dest)


@pytest.fixture
def scaffold(tmp_path):
    target = str(tmp_path / "my-site")
    runner = FakeCommandRunner(cwd=target)
    runner.set_side_effect(["npm", "init"], _npm_init)
    runner.set_side_effect(["composer", "create-project"], _composer_create_project)
    runner.set_side_effect(["unzip"], _unzip)
    runner.set_failure(["aws", "configure"], exit_code=1)
    output = []
    deps = ScaffolderDeps(
        runner=runner,
        scripts_installer=ScriptsInstaller(runner, FileTransfer(session=_GitHubSession())),
        reshaper=TreeReshaper(target),
        provisioner=BucketProvisioner(runner),
        echo=output.append,
    )

    def run(**opts):
        SiteScaffolder(SiteOpts(target_directory=target, **opts), deps).run()
        return target, output

    return run


@pytest.mark.integration
class TestFullScaffold:

    def test_produces_final_layout(self, scaffold):
        target, _ = scaffold()

        assert os.path.isfile(os.path.join(target, "package.json"))
        assert os.path.isfile(os.path.join(target, "craft", "composer.json"))
        assert not os.path.exists(os.path.join(target, "craft", "web"))
        assert os.path.isfile(os.path.join(target, "www", "index.php"))
        assert os.path.isfile(os.path.join(target, "www", "css", "main.css"))
        assert os.path.isfile(os.path.join(target, "www", "cpresources", ".gitkeep"))
        assert not os.path.exists(os.path.join(target, "www", "index.html"))
        assert not os.path.exists(os.path.join(target, "www", "web.config"))
        assert not os.path.exists(os.path.join(target, "www-starter"))
        assert os.path.isfile(os.path.join(target, "scripts", "pull_db.sh"))
        assert os.path.isfile(os.path.join(target, "scripts", "common", "defaults.sh"))

    def test_patches_and_appends(self, scaffold):
        target, _ = scaffold()

        with open(os.path.join(target, "www", "index.php")) as f:
            assert "define('CRAFT_BASE_PATH', '../craft');" in f.read()
        with open(os.path.join(target, "www", ".htaccess")) as f:
            htaccess = f.read()
        assert htaccess.startswith("RewriteEngine On\n")
        assert "<IfModule mod_headers.c>" in htaccess
        with open(os.path.join(target, ".gitignore")) as f:
            assert "/craft/vendor" in f.read()

    def test_leaves_no_scratch_directory(self, scaffold, scratch_root):
        scaffold()

        assert os.listdir(scratch_root) == []

    def test_bucket_without_credentials_still_completes(self, scaffold):
        target, output = scaffold(bucket="")

        assert any("manually" in line for line in output)
        assert "gulp watch" in output[-1]
        assert os.path.isdir(os.path.join(target, "www"))
