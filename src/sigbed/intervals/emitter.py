#!/usr/bin/env python3

"""Write intervals as BED lines, optionally behind a UCSC track line.
"""

defaultHeaderName = 'sigbed'

def formatNumber(value):
    """ print criteria like 1.0 as 1 """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)

def headerSummary(options):
    if options.matchAllPresent:
        summary = 'present'
    elif options.strict:
        summary = 'value == %s' % formatNumber(options.criterion)
    else:
        summary = 'value >= %s' % formatNumber(options.criterion)
    if options.graceDistance > 0:
        summary += ', grace %d' % options.graceDistance
    if options.minWidth > 1:
        summary += ', min width %d' % options.minWidth
    return summary

def headerLine(options):
    """ the single track line written before the intervals, e.g.
    track name="sigbed" description="column 3: value >= 1, grace 2" """
    name = options.headerName
    if name is None:
        name = defaultHeaderName
    description = options.headerDescription
    if description is None:
        if options.matchAllPresent:
            description = 'present positions'
        else:
            description = 'column %d' % options.column
    return 'track name="%s" description="%s: %s"' % (name, description, headerSummary(options))

def formatInterval(interval, offset=-1, separator='\t'):
    return separator.join([interval.reference,
                           str(interval.begin + offset),
                           str(interval.end + offset)])

def writeIntervals(intervals, outStream, options):
    """ write the header (if enabled) then one line per interval.  returns
    the number of intervals written """
    if options.emitHeader:
        outStream.write(headerLine(options) + '\n')
    count = 0
    for interval in intervals:
        outStream.write(formatInterval(interval, options.offset, options.outputSeparator) + '\n')
        count += 1
    return count
