#!/usr/bin/env python3

"""
Convert a per-position signal (reference, position, value) into BED intervals
covering the positions whose value meets a criterion.

example: report runs of depth >= 5 from a samtools depth file, allowing
gaps of up to 10bp inside a run and dropping runs shorter than 50bp

  samtools depth -a in.bam | sigbed-intervals --headerLines 0 --criterion 5 --graceDistance 10 --minWidth 50
"""

import os
import sys
import tempfile
from argparse import ArgumentParser

from toil.statsAndLogging import logger
from toil.statsAndLogging import add_logging_options
from toil.statsAndLogging import set_logging_from_options

from sigbed.shared.common import openInput
from sigbed.shared.common import parseNumber
from sigbed.shared.configWrapper import ConfigWrapper
from sigbed.intervals.records import readRecords
from sigbed.intervals.accumulator import IntervalAccumulator
from sigbed.intervals.accumulator import coalesceIntervals
from sigbed.intervals.emitter import writeIntervals

def addIntervalOptions(parser):
    """ the command line options that override the <intervals> element of the config """
    parser.add_argument("--configFile", dest="configFile",
                        help="Specify sigbed configuration file",
                        default=ConfigWrapper.defaultConfigPath())
    parser.add_argument("--column", type=int, default=None,
                        help="Column (1-based) of the value to test.  0 treats every position present "
                        "in the input as a match [default: 3]")
    parser.add_argument("--criterion", type=parseNumber, default=None,
                        help="Value a position must reach to match [default: 1]")
    parser.add_argument("--strict", action="store_true", default=None,
                        help="Only match values equal to the criterion (rather than >=)")
    parser.add_argument("--nonStrict", dest="strict", action="store_false", default=None,
                        help="Match values >= the criterion, even if the config file sets strict")
    parser.add_argument("--inputSeparator", default=None,
                        help="Input field separator: tab, space, comma, whitespace or a literal string [default: tab]")
    parser.add_argument("--outputSeparator", default=None,
                        help="Output field separator: tab, space, comma or a literal string [default: tab]")
    parser.add_argument("--headerLines", type=int, default=None,
                        help="Number of leading input lines to skip [default: 1]")
    parser.add_argument("--keepComments", dest="skipComments", action="store_false", default=None,
                        help="Parse lines beginning with # instead of skipping them")
    parser.add_argument("--graceDistance", type=int, default=None,
                        help="Number of non-matching or absent positions allowed inside an interval [default: 0]")
    parser.add_argument("--minWidth", type=int, default=None,
                        help="Do not output intervals narrower than this [default: 1]")
    parser.add_argument("--noHeader", dest="emitHeader", action="store_false", default=None,
                        help="Do not write a track line")
    parser.add_argument("--headerName", default=None,
                        help="Name to put in the track line")
    parser.add_argument("--headerDescription", default=None,
                        help="Description to put in the track line")
    parser.add_argument("--offset", type=int, default=None,
                        help="Added to interval bounds on output.  The default converts 1-based "
                        "input positions to 0-based BED [default: -1]")

def signalToIntervals(inStream, outStream, options):
    """ read the signal from inStream and write intervals to outStream.  returns the
    accumulator so its counters can be logged """
    accumulator = IntervalAccumulator(options)
    records = readRecords(inStream, options)
    writeIntervals(coalesceIntervals(records, options, accumulator), outStream, options)
    return accumulator

def signalToFile(inStream, outputFile, options):
    """ like signalToIntervals, but outputFile only appears once every interval is
    written.  a failure leaves no partial bed behind """
    outDir = os.path.dirname(os.path.abspath(outputFile))
    with tempfile.NamedTemporaryFile(mode='w', dir=outDir, prefix='.sigbed-', suffix='.bed',
                                     delete=False) as outStream:
        tempPath = outStream.name
        try:
            accumulator = signalToIntervals(inStream, outStream, options)
        except Exception:
            outStream.close()
            os.remove(tempPath)
            raise
    os.replace(tempPath, outputFile)
    return accumulator

def logSummary(accumulator):
    logger.info("Read {} records, wrote {} intervals ({} dropped for being narrower than {})".format(
        accumulator.recordCount, accumulator.emittedCount, accumulator.droppedCount, accumulator.minWidth))

def main():
    parser = ArgumentParser(description=__doc__)
    add_logging_options(parser)

    parser.add_argument("signalFile", nargs='?', default=None,
                        help="Input signal file (can be gzipped). Read from stdin if not given")
    parser.add_argument("--outputFile", default=None,
                        help="Output BED file.  Written to stdout if not given")
    addIntervalOptions(parser)

    options = parser.parse_args()
    set_logging_from_options(options)

    intervalOptions = ConfigWrapper.fromFile(options.configFile).getIntervalOptions(overrides=options)
    logger.debug("Interval options: {}".format(intervalOptions))

    inStream = openInput(options.signalFile) if options.signalFile else sys.stdin
    try:
        if options.outputFile:
            accumulator = signalToFile(inStream, options.outputFile, intervalOptions)
        else:
            accumulator = signalToIntervals(inStream, sys.stdout, intervalOptions)
    finally:
        if options.signalFile:
            inStream.close()
    logSummary(accumulator)

if __name__ == "__main__":
    main()
