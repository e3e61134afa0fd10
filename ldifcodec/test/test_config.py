"""
Test cases for the ldifcodec.config module.
"""

import io
import os
import pathlib

from twisted.trial import unittest

from ldifcodec import config, ldifdelta


def writeFile(path, content):
    f = open(path, "wb")
    f.write(content)
    f.close()


def reloadFromContent(testCase, content):
    """
    Reload the global configuration file with raw `content`.
    """
    base_path = testCase.mktemp()
    os.mkdir(base_path)
    config_path = os.path.join(base_path, "test.cfg")
    writeFile(config_path, content)

    # Reload with empty content to reduce the side effects.
    testCase.addCleanup(config.loadConfig, configFiles=[], reload=True)

    return config.loadConfig(
        configFiles=[config_path],
        reload=True,
    )


class TestLoadConfig(unittest.TestCase):
    """
    Tests for loadConfig.
    """

    def testMultileConfigurationFile(self):
        """
        It can read configuration from multiple files, merging the
        loaded values.
        """
        self.dir = self.mktemp()
        os.mkdir(self.dir)
        self.f1 = os.path.join(self.dir, "one.cfg")
        writeFile(
            self.f1,
            b"""\
[fooSection]
fooVar = val

[barSection]
barVar = anotherVal
""",
        )
        self.f2 = os.path.join(self.dir, "two.cfg")
        writeFile(
            self.f2,
            b"""\
[fooSection]
fooVar = val2
""",
        )
        self.addCleanup(config.loadConfig, configFiles=[], reload=True)
        self.cfg = config.loadConfig(configFiles=[self.f1, self.f2], reload=True)

        val = self.cfg.get("fooSection", "fooVar")
        self.assertEqual(val, "val2")

        val = self.cfg.get("barSection", "barVar")
        self.assertEqual(val, "anotherVal")

    def testCached(self):
        """
        Without reload the already loaded configuration is returned.
        """
        cfg = reloadFromContent(self, b"")
        self.assertIdentical(config.loadConfig(), cfg)


class TestURIEnabled(unittest.TestCase):
    """
    The default for loading URI value-specs.
    """

    def testDefault(self):
        reloadFromContent(self, b"")
        self.assertFalse(config.uriEnabled())

    def testEnabled(self):
        reloadFromContent(
            self,
            b"""\
[ldif]
URI-Enabled = yes
""",
        )
        self.assertTrue(config.uriEnabled())

    def testReaderUsesConfiguredDefault(self):
        reloadFromContent(self, b"[ldif]\nuri-enabled = true\n")
        path = os.path.abspath(self.mktemp())
        writeFile(path, b"content")
        uri = pathlib.Path(path).as_uri()

        records = ldifdelta.fromLDIFFile(io.StringIO("dn: cn=foo\ndescription:< %s\n" % uri))
        self.assertEqual(records[0]["description"], [b"content"])

    def testArgumentOverridesConfiguration(self):
        reloadFromContent(self, b"[ldif]\nuri-enabled = true\n")
        reader = ldifdelta.parse(io.StringIO(""), uriEnabled=False)
        self.assertFalse(reader.uriEnabled)
