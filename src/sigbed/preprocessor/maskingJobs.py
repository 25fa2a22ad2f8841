#!/usr/bin/env python3
"""Toil jobs to turn a signal file into a bed and mask a fasta with it
"""

import os

from toil.realtimeLogger import RealtimeLogger

from sigbed.shared.common import RoundedJob
from sigbed.shared.common import openInput
from sigbed.intervals.sigbed_intervals import signalToIntervals
from sigbed.preprocessor.maskIntervals import readMaskIntervals
from sigbed.preprocessor.maskIntervals import maskFasta

class CoveredIntervalsJob(RoundedJob):
    def __init__(self, signalID, options, signalName='signal.tsv'):
        disk = 2*(signalID.size)
        RoundedJob.__init__(self, disk=disk, preemptible=True)
        self.signalID = signalID
        self.options = options
        # keep the extension so gzipped input is detected
        self.signalName = signalName

    def run(self, fileStore):
        """
        coalesce the signal into intervals.  returns the bed file id
        """
        work_dir = fileStore.getLocalTempDir()
        signalFile = os.path.join(work_dir, self.signalName)
        fileStore.readGlobalFile(self.signalID, signalFile)

        bedFile = os.path.join(work_dir, 'intervals.bed')
        with openInput(signalFile) as inStream, open(bedFile, 'w') as outStream:
            accumulator = signalToIntervals(inStream, outStream, self.options)

        RealtimeLogger.info("Coalesced {} records into {} intervals ({} dropped below width {})".format(
            accumulator.recordCount, accumulator.emittedCount, accumulator.droppedCount, accumulator.minWidth))
        return fileStore.writeGlobalFile(bedFile)

class IntervalMaskingJob(RoundedJob):
    def __init__(self, fastaID, bedID, origin="zero", maskChar=None, preserveCase=False, unmask=False,
                 fastaName='seq.fa'):
        disk = 2*(fastaID.size) + bedID.size
        memory = bedID.size * 4
        RoundedJob.__init__(self, disk=disk, memory=memory, preemptible=True)
        self.fastaID = fastaID
        self.bedID = bedID
        self.origin = origin
        self.maskChar = maskChar
        self.preserveCase = preserveCase
        self.unmask = unmask
        self.fastaName = fastaName

    def run(self, fileStore):
        """
        apply the bed to the fasta.  returns the masked fasta id
        """
        work_dir = fileStore.getLocalTempDir()
        # keep the extension so gzipped input is detected
        fastaFile = os.path.join(work_dir, 'input_' + self.fastaName)
        fileStore.readGlobalFile(self.fastaID, fastaFile)
        bedFile = os.path.join(work_dir, 'regions.bed')
        fileStore.readGlobalFile(self.bedID, bedFile)

        with open(bedFile, 'r') as bedStream:
            chromToIntervals = readMaskIntervals(bedStream, origin=self.origin)

        maskedFile = os.path.join(work_dir, 'masked.fa')
        with openInput(fastaFile) as inStream, open(maskedFile, 'w') as outStream:
            maskedBases = maskFasta(inStream, outStream, chromToIntervals, maskChar=self.maskChar,
                                    preserveCase=self.preserveCase, unmask=self.unmask)

        RealtimeLogger.info("Masked {} bp in {} sequences".format(maskedBases, len(chromToIntervals)))
        return fileStore.writeGlobalFile(maskedFile)

def maskFromSignal(job, signalID, fastaID, options, maskChar=None, preserveCase=False, signalName='signal.tsv',
                   fastaName='seq.fa'):
    """ signal -> bed -> masked fasta.  returns (masked fasta id, bed id) """
    if options.offset != -1:
        # the bed is written with options.offset applied, and masking reads it as origin zero
        raise RuntimeError("Masking from a signal requires offset -1, got {}".format(options.offset))
    intervals_job = job.addChild(CoveredIntervalsJob(signalID, options, signalName=signalName))
    bed_id = intervals_job.rv()
    mask_job = intervals_job.addFollowOnJobFn(runMaskingJob, fastaID, bed_id, maskChar, preserveCase, fastaName)
    return mask_job.rv(), bed_id

def runMaskingJob(job, fastaID, bedID, maskChar, preserveCase, fastaName):
    """ the bed id is only a promise when maskFromSignal runs, so its size is
    known here """
    return job.addChild(IntervalMaskingJob(fastaID, bedID, maskChar=maskChar,
                                           preserveCase=preserveCase, fastaName=fastaName)).rv()
