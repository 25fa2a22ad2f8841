#!/usr/bin/env python3

"""Turn the lines of a per-position signal file into records.

The input looks like (tab separated, one header line):

  chrom   pos   depth
  chr1    1     0
  chr1    2     3
  chr1    3     4

Column 1 is the reference name and column 2 the 1-based position.  The value
is read from options.column unless options.matchAllPresent is set, in which
case every record gets the criterion as its value.
"""

from collections import namedtuple

from sigbed.shared.common import MalformedRecordError
from sigbed.shared.common import parseNumber

Record = namedtuple('Record', ['reference', 'position', 'value'])

REFERENCE_COLUMN = 1
POSITION_COLUMN = 2

def parseRecord(line, options, lineNumber=None):
    """ split one data line into a Record """
    fields = line.split(options.inputSeparator)
    if len(fields) < options.requiredFields():
        raise MalformedRecordError("Expected at least %d fields, found %d" % (options.requiredFields(), len(fields)),
                                   lineNumber, line)
    reference = fields[REFERENCE_COLUMN - 1]
    try:
        position = int(fields[POSITION_COLUMN - 1])
    except ValueError:
        raise MalformedRecordError("Bad position \"%s\"" % fields[POSITION_COLUMN - 1], lineNumber, line)
    if options.matchAllPresent:
        value = options.criterion
    else:
        try:
            value = parseNumber(fields[options.column - 1])
        except ValueError:
            raise MalformedRecordError("Bad value \"%s\"" % fields[options.column - 1], lineNumber, line)
    return Record(reference, position, value)

def readRecords(lines, options):
    """ lazily yield Records from an iterable of lines, skipping the header lines,
    comments (if options.skipComments) and blank lines """
    lineNumber = 0
    for line in lines:
        lineNumber += 1
        if lineNumber <= options.headerLines:
            continue
        line = line.rstrip('\r\n')
        if options.skipComments and line.startswith('#'):
            continue
        if line.strip() == '':
            continue
        yield parseRecord(line, options, lineNumber)
