#!/usr/bin/env python3

"""
Mask a fasta file with the intervals coalesced from a per-position signal, as a toil workflow.
"""

import os
from argparse import ArgumentParser
import timeit

from toil.job import Job
from toil.common import Toil
from toil.statsAndLogging import logger
from toil.statsAndLogging import set_logging_from_options

from sigbed.shared.common import makeURL
from sigbed.shared.configWrapper import ConfigWrapper
from sigbed.intervals.sigbed_intervals import addIntervalOptions
from sigbed.preprocessor.maskingJobs import maskFromSignal

def main():
    parser = ArgumentParser(description=__doc__)
    Job.Runner.addToilOptions(parser)

    parser.add_argument("signalFile", help = "Input signal file (can be gzipped)")
    parser.add_argument("fastaFile", help = "Fasta file to mask")
    parser.add_argument("outputFasta", help = "Masked fasta file")
    parser.add_argument("--outputBed", help = "Also export the intervals used for masking to this file")
    parser.add_argument("--mask", dest="maskChar", default=None,
                        help = "Hardmask with this character rather than softmasking")
    parser.add_argument("--preserveCase", action="store_true", default=None,
                        help = "Give the mask character the case of each base it replaces")
    addIntervalOptions(parser)

    options = parser.parse_args()
    set_logging_from_options(options)

    config = ConfigWrapper.fromFile(options.configFile)
    intervalOptions = config.getIntervalOptions(overrides=options)
    maskChar = options.maskChar if options.maskChar is not None else config.getMaskChar()
    if maskChar is not None and len(maskChar) != 1:
        raise RuntimeError("--mask requires a single character")
    preserveCase = options.preserveCase if options.preserveCase is not None else config.getPreserveCase()

    start_time = timeit.default_timer()
    with Toil(options) as toil:
        if options.restart:
            masked_id, bed_id = toil.restart()
        else:
            signal_id = toil.importFile(makeURL(options.signalFile))
            fasta_id = toil.importFile(makeURL(options.fastaFile))
            masked_id, bed_id = toil.start(Job.wrapJobFn(maskFromSignal, signal_id, fasta_id, intervalOptions,
                                                         maskChar=maskChar, preserveCase=preserveCase,
                                                         signalName=os.path.basename(options.signalFile),
                                                         fastaName=os.path.basename(options.fastaFile)))

        toil.exportFile(masked_id, makeURL(options.outputFasta))
        if options.outputBed:
            toil.exportFile(bed_id, makeURL(options.outputBed))

    end_time = timeit.default_timer()
    run_time = end_time - start_time
    logger.info("sigbed-preprocess has finished after {} seconds".format(run_time))

if __name__ == "__main__":
    main()
