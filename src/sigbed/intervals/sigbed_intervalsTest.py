#!/usr/bin/env python3

import io
import os
import gzip
import shutil
import tempfile
import unittest
from types import SimpleNamespace
from unittest import mock

from sigbed.shared.common import MalformedRecordError
from sigbed.shared.configWrapper import ConfigWrapper
from sigbed.intervals import sigbed_intervals
from sigbed.intervals.sigbed_intervals import signalToIntervals

"""Runs the whole reader -> accumulator -> emitter chain on small signals
"""

def makeSignal(reference, matching, nonMatching=(), header=True):
    lines = ["chrom\tpos\tvalue\n"] if header else []
    values = dict([(p, 1) for p in matching] + [(p, 0) for p in nonMatching])
    for p in sorted(values):
        lines.append("%s\t%d\t%d\n" % (reference, p, values[p]))
    return "".join(lines)

class TestCase(unittest.TestCase):
    def setUp(self):
        unittest.TestCase.setUp(self)
        self.tempDir = tempfile.mkdtemp(dir=os.getcwd())
        self.config = ConfigWrapper.fromFile()

    def tearDown(self):
        unittest.TestCase.tearDown(self)
        shutil.rmtree(self.tempDir)

    def run_signal(self, signal, **overrides):
        options = self.config.getIntervalOptions(overrides=SimpleNamespace(**overrides))
        out = io.StringIO()
        accumulator = signalToIntervals(io.StringIO(signal), out, options)
        return out.getvalue().splitlines(), accumulator

    def testGraceExample(self):
        signal = makeSignal('chr1', list(range(1, 9)) + list(range(11, 14)))
        lines, _ = self.run_signal(signal, graceDistance=2, emitHeader=False)
        self.assertEqual(lines, ['chr1\t0\t13'])
        lines, _ = self.run_signal(signal, graceDistance=1, emitHeader=False)
        self.assertEqual(lines, ['chr1\t0\t8', 'chr1\t10\t13'])

    def testGraceExampleFromPositionTwo(self):
        signal = makeSignal('chr1', list(range(2, 9)) + list(range(11, 14)), nonMatching=[1, 9, 10])
        lines, _ = self.run_signal(signal, graceDistance=2, emitHeader=False, outputSeparator=' ')
        self.assertEqual(lines, ['chr1 1 13'])
        lines, _ = self.run_signal(signal, graceDistance=1, emitHeader=False, outputSeparator=' ')
        self.assertEqual(lines, ['chr1 1 8', 'chr1 10 13'])

    def testHeaderAndReferences(self):
        signal = makeSignal('chr1', [5, 6, 7]) + makeSignal('chr2', [1, 2], header=False)
        lines, accumulator = self.run_signal(signal, graceDistance=3, minWidth=2)
        self.assertEqual(lines, ['track name="sigbed" description="column 3: value >= 1, grace 3, min width 2"',
                                 'chr1\t4\t7', 'chr2\t0\t2'])
        self.assertEqual(accumulator.recordCount, 5)
        self.assertEqual(accumulator.emittedCount, 2)

    def testPresenceMode(self):
        signal = "chr1\t1\nchr1\t2\nchr1\t4\n"
        lines, _ = self.run_signal(signal, column=0, headerLines=0, emitHeader=False)
        self.assertEqual(lines, ['chr1\t0\t2', 'chr1\t3\t4'])

    def testMalformedLineAborts(self):
        signal = makeSignal('chr1', [1, 2]) + "chr1\t3\n"
        with self.assertRaises(MalformedRecordError):
            self.run_signal(signal)

    def testMain(self):
        signalFile = os.path.join(self.tempDir, "signal.tsv.gz")
        with gzip.open(signalFile, "wt") as signalStream:
            signalStream.write(makeSignal('chr3', [10, 11, 12, 20], nonMatching=[13, 14]))
        outFile = os.path.join(self.tempDir, "out.bed")
        argv = ["sigbed-intervals", signalFile, "--outputFile", outFile, "--noHeader", "--minWidth", "2"]
        with mock.patch("sys.argv", argv):
            sigbed_intervals.main()
        with open(outFile) as outStream:
            self.assertEqual(outStream.read(), "chr3\t9\t12\n")

    def testMainLeavesNoOutputOnError(self):
        signalFile = os.path.join(self.tempDir, "signal.tsv")
        with open(signalFile, "w") as signalStream:
            signalStream.write(makeSignal('chr1', [1, 2, 3]))
            signalStream.write("chr2\t1\t1\nchr2\t2\n")
        outFile = os.path.join(self.tempDir, "out.bed")
        argv = ["sigbed-intervals", signalFile, "--outputFile", outFile]
        with mock.patch("sys.argv", argv):
            with self.assertRaises(MalformedRecordError):
                sigbed_intervals.main()
        self.assertFalse(os.path.exists(outFile))
        self.assertEqual(os.listdir(self.tempDir), ["signal.tsv"])

    def testMainReplacesOutput(self):
        signalFile = os.path.join(self.tempDir, "signal.tsv")
        with open(signalFile, "w") as signalStream:
            signalStream.write(makeSignal('chr1', [1, 2, 3]))
        outFile = os.path.join(self.tempDir, "out.bed")
        with open(outFile, "w") as outStream:
            outStream.write("stale\n")
        argv = ["sigbed-intervals", signalFile, "--outputFile", outFile, "--noHeader"]
        with mock.patch("sys.argv", argv):
            sigbed_intervals.main()
        with open(outFile) as outStream:
            self.assertEqual(outStream.read(), "chr1\t0\t3\n")

    def testMainNonStrictOverridesConfig(self):
        configFile = os.path.join(self.tempDir, "config.xml")
        with open(configFile, "w") as xmlFile:
            xmlFile.write('<sigbed_config><intervals strict="1" emitHeader="0"/></sigbed_config>\n')
        signalFile = os.path.join(self.tempDir, "signal.tsv")
        with open(signalFile, "w") as signalStream:
            signalStream.write("chrom\tpos\tvalue\nchr1\t1\t1\nchr1\t2\t2\n")
        outFile = os.path.join(self.tempDir, "out.bed")
        argv = ["sigbed-intervals", signalFile, "--outputFile", outFile, "--configFile", configFile]
        with mock.patch("sys.argv", argv):
            sigbed_intervals.main()
        with open(outFile) as outStream:
            self.assertEqual(outStream.read(), "chr1\t0\t1\n")
        with mock.patch("sys.argv", argv + ["--nonStrict"]):
            sigbed_intervals.main()
        with open(outFile) as outStream:
            self.assertEqual(outStream.read(), "chr1\t0\t2\n")

def main():
    unittest.main()

if __name__ == '__main__':
    main()
