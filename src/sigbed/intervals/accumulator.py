#!/usr/bin/env python3

"""Coalesce per-position records into half-open intervals of matching positions.

The accumulator is a two state machine (idle, or an interval open) that
looks at one record at a time.  An open interval [begin, end) always has end
one past the last matching position.  When graceDistance > 0, up to that
many non-matching or absent positions can sit inside an interval as long as
a match follows them.  Non-matching records advance graceCounter as they
arrive; the counter is only folded into end when the next match turns up.
"""

from collections import namedtuple

from sigbed.shared.common import InvalidIntervalError
from sigbed.shared.common import UnsortedRecordError

class Interval(namedtuple('Interval', ['reference', 'begin', 'end'])):
    __slots__ = ()

    def __new__(cls, reference, begin, end):
        if end <= begin:
            raise InvalidIntervalError("Interval %s:%d-%d has end <= begin" % (reference, begin, end))
        return super(Interval, cls).__new__(cls, reference, begin, end)

    def width(self):
        return self.end - self.begin

class IntervalAccumulator:
    def __init__(self, options):
        self.graceDistance = options.graceDistance
        self.minWidth = options.minWidth
        self.criterion = options.criterion
        self.strict = options.strict

        self.reference = None
        self.begin = None
        self.end = None
        self.graceCounter = 0

        # ordering checks
        self.lastPosition = None
        self.seenReferences = set()

        # stats
        self.recordCount = 0
        self.emittedCount = 0
        self.droppedCount = 0

    def matches(self, value):
        if self.strict:
            return value == self.criterion
        return value >= self.criterion

    def isActive(self):
        return self.begin is not None

    def add(self, record):
        """ process one record, returning the list of intervals it closed (at most one) """
        self.recordCount += 1
        closed = []
        if record.reference != self.reference:
            if record.reference in self.seenReferences:
                raise UnsortedRecordError("Reference %s appears again after %s: input must be grouped by reference" % (
                    record.reference, self.reference))
            if self.reference is not None:
                self._flush(closed)
            self.reference = record.reference
            self.seenReferences.add(record.reference)
            self.lastPosition = None
        elif record.position <= self.lastPosition:
            raise UnsortedRecordError("Position %d follows %d on %s: positions must be strictly increasing" % (
                record.position, self.lastPosition, record.reference))
        self.lastPosition = record.position

        position = record.position
        if not self.isActive():
            if self.matches(record.value):
                self._open(position)
        elif self.matches(record.value):
            if position == self.end:
                if self.graceCounter > 0:
                    self.end += self.graceCounter
                    self.graceCounter = 0
                self.end += 1
            elif position > self.end and self.graceDistance > 0 and position - self.end <= self.graceDistance:
                self.end = position + 1
                self.graceCounter = 0
            else:
                self._emit(closed)
                self._open(position)
        elif self.graceDistance > 0 and self.graceCounter + 1 <= self.graceDistance:
            self.graceCounter += 1
        else:
            self._flush(closed)
        return closed

    def close(self):
        """ end of stream: return the list of intervals still open (at most one) """
        closed = []
        self._flush(closed)
        return closed

    def _open(self, position):
        self.begin = position
        self.end = position + 1
        self.graceCounter = 0

    def _flush(self, closed):
        # outstanding grace is dropped, never added to the interval
        if self.isActive():
            self._emit(closed)
        self.begin = None
        self.end = None
        self.graceCounter = 0

    def _emit(self, closed):
        interval = Interval(self.reference, self.begin, self.end)
        if interval.width() >= self.minWidth:
            self.emittedCount += 1
            closed.append(interval)
        else:
            self.droppedCount += 1

def coalesceIntervals(records, options, accumulator=None):
    """ lazily turn an iterable of records into intervals.  pass in an
    accumulator to read its counters afterwards """
    if accumulator is None:
        accumulator = IntervalAccumulator(options)
    for record in records:
        for interval in accumulator.add(record):
            yield interval
    for interval in accumulator.close():
        yield interval
