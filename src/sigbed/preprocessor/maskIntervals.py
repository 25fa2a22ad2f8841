#!/usr/bin/env python3
"""
Given a list of intervals, mask those bases in the fasta sequence(s).

  sigbed-mask [options] <intervals_file> < fasta_file > fasta_file

By default the covered bases are soft-masked (lowercased).  --mask=N
hard-masks them instead, and --unmask uppercases them.
"""

import sys
from argparse import ArgumentParser

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqIO import FastaIO
from Bio.SeqRecord import SeqRecord

from toil.statsAndLogging import logger
from toil.statsAndLogging import add_logging_options
from toil.statsAndLogging import set_logging_from_options

from sigbed.shared.common import InvalidIntervalError
from sigbed.shared.common import MalformedRecordError
from sigbed.shared.common import openInput

def mergeAndSort(intervals):
    """ merge a set of (start, end) intervals (union of sets) and sort them by
    increasing position.  adjoining intervals are merged too """
    start = None
    for (s, e) in sorted(intervals):
        if start is None:
            (start, end) = (s, e)
        elif s > end:
            yield (start, end)
            (start, end) = (s, e)
        elif e > end:
            end = e

    if start is not None:
        yield (start, end)

def readMaskIntervals(lines, origin="zero", chroms=None):
    """ read <chrom> <start> <end> lines into a map of chrom -> merged, sorted
    intervals (origin zero, half open).  with origin="one" the input is taken
    as origin one, closed """
    if origin not in ("zero", "one"):
        raise RuntimeError("Interval origin must be zero or one, got %s" % origin)
    chromToIntervals = {}

    lineNumber = 0
    for line in lines:
        lineNumber += 1
        line = line.strip()
        if line == "" or line.startswith("#") or line.startswith("track") or line.startswith("browser"):
            continue

        fields = line.split()
        if len(fields) < 3:
            raise MalformedRecordError("Not enough fields", lineNumber, line)
        chrom = fields[0]
        try:
            start = int(fields[1])
            end = int(fields[2])
        except ValueError:
            raise MalformedRecordError("Bad interval coordinates", lineNumber, line)
        if origin == "one":
            start -= 1
        if start < 0 or start >= end:
            raise InvalidIntervalError("Bad interval (line %d): %s" % (lineNumber, line))

        if chroms is not None and chrom not in chroms:
            continue
        chromToIntervals.setdefault(chrom, []).append((start, end))

    for chrom in chromToIntervals:
        chromToIntervals[chrom] = list(mergeAndSort(chromToIntervals[chrom]))
    return chromToIntervals

def maskSequence(sequence, intervals, maskChar=None, preserveCase=False, unmask=False):
    """ apply sorted, non-overlapping (start, end) intervals to a sequence string.
    no maskChar: lowercase the covered bases (uppercase them if unmask).
    maskChar: replace covered bases with it, taking the case of the replaced
    base if preserveCase is set """
    newSeq = []
    prevEnd = 0
    for (start, end) in intervals:
        if end > len(sequence):
            raise InvalidIntervalError("Interval {}-{} extends past the end of a sequence of length {}".format(
                start, end, len(sequence)))
        if prevEnd < start:
            newSeq.append(sequence[prevEnd:start])
        covered = sequence[start:end]
        if maskChar is None:
            newSeq.append(covered.upper() if unmask else covered.lower())
        elif preserveCase:
            upperChar, lowerChar = maskChar.upper(), maskChar.lower()
            newSeq.append("".join(upperChar if c.isupper() else lowerChar for c in covered))
        else:
            newSeq.append(maskChar * (end - start))
        prevEnd = end
    if prevEnd < len(sequence):
        newSeq.append(sequence[prevEnd:])
    newSeq = "".join(newSeq)
    assert len(newSeq) == len(sequence)
    return newSeq

def maskFasta(inStream, outStream, chromToIntervals, chroms=None, wrap=0,
              maskChar=None, preserveCase=False, unmask=False):
    """ stream fasta records from inStream to outStream, masking the intervals
    for each one.  returns the number of bases covered by intervals """
    chromSeen = set()
    maskedBases = [0]

    def maskedRecords():
        for seq_record in SeqIO.parse(inStream, 'fasta'):
            if chroms is not None and seq_record.id not in chroms:
                continue
            if seq_record.id in chromSeen:
                raise RuntimeError("More than one sequence is named %s" % seq_record.id)
            chromSeen.add(seq_record.id)
            intervals = chromToIntervals.get(seq_record.id, [])
            maskedBases[0] += sum(end - start for (start, end) in intervals)
            seq_str = maskSequence(str(seq_record.seq), intervals, maskChar=maskChar,
                                   preserveCase=preserveCase, unmask=unmask)
            yield SeqRecord(Seq(seq_str), id=seq_record.id, name=seq_record.name,
                            description=seq_record.description)

    writer = FastaIO.FastaWriter(outStream, wrap=wrap if wrap else None)
    writer.write_file(maskedRecords())

    missing = [chrom for chrom in chromToIntervals if chrom not in chromSeen]
    if missing:
        raise RuntimeError("Missing fasta sequence %s" % ", ".join(missing))
    return maskedBases[0]

def main():
    parser = ArgumentParser(description=__doc__)
    add_logging_options(parser)

    parser.add_argument("intervalsFile",
                        help="file containing a list of intervals to be masked, in the form <chrom> <start> <end>. "
                        "--origin determines whether these are origin one or zero")
    parser.add_argument("--chrom", "--chroms", dest="chroms", action="append", default=None,
                        help="copy (and mask) only the specified sequence(s), as a comma-separated list. "
                        "default is to copy and mask all sequences")
    parser.add_argument("--origin", default="zero", choices=["zero", "one", "0", "1"],
                        help="one: intervals are origin-one, closed.  zero: origin-zero, half-open [default: zero]")
    parser.add_argument("--wrap", type=int, default=0,
                        help="split each sequence into lines of this length (default is a single line)")
    parser.add_argument("--mask", dest="maskChar", default=None,
                        help="mask with a particular character (usually X or N). default is to mask with lowercase")
    parser.add_argument("--preserveCase", action="store_true",
                        help="give the mask character the case of each base it replaces")
    parser.add_argument("--unmask", action="store_true",
                        help="uppercase the intervals instead of masking them")

    options = parser.parse_args()
    set_logging_from_options(options)

    if options.maskChar is not None and len(options.maskChar) != 1:
        raise RuntimeError("--mask requires a single character")
    if options.unmask and options.maskChar is not None:
        raise RuntimeError("--unmask cannot be used with --mask")
    origin = {"0": "zero", "1": "one"}.get(options.origin, options.origin)
    chroms = None
    if options.chroms:
        chroms = set()
        for chromList in options.chroms:
            chroms.update(chromList.split(","))

    with openInput(options.intervalsFile) as intervalsStream:
        chromToIntervals = readMaskIntervals(intervalsStream, origin=origin, chroms=chroms)

    maskedBases = maskFasta(sys.stdin, sys.stdout, chromToIntervals, chroms=chroms, wrap=options.wrap,
                            maskChar=options.maskChar, preserveCase=options.preserveCase, unmask=options.unmask)
    logger.info("{} {} bp in {} sequences".format("Unmasked" if options.unmask else "Masked",
                                                  maskedBases, len(chromToIntervals)))

if __name__ == "__main__":
    main()
