#!/usr/bin/env python3

#Copyright (C) 2011 by Glenn Hickey
#
#Released under the MIT license, see LICENSE.txt

""" Interface to the sigbed config xml file used
to read the interval-related fields. the <intervals>
element must be there, but its attributes are optional,
with defaults stored as static members of the
configwrapper class

"""
import os
import xml.etree.ElementTree as ET

from toil.statsAndLogging import logger

from sigbed.shared.common import findRequiredNode
from sigbed.shared.common import getOptionalAttrib
from sigbed.shared.common import parseSeparator
from sigbed.shared.common import parseNumber
from sigbed.shared.common import sigbedRootPath

class IntervalOptions:
    """ The resolved settings consumed by the reader, the accumulator and the emitter """
    def __init__(self):
        self.column = 3
        self.criterion = 1
        self.strict = False
        self.matchAllPresent = False
        self.inputSeparator = '\t'
        self.outputSeparator = '\t'
        self.headerLines = 1
        self.skipComments = True
        self.graceDistance = 0
        self.minWidth = 1
        self.emitHeader = True
        self.headerName = None
        self.headerDescription = None
        self.offset = -1

    def resolve(self):
        """ check the ranges and turn column 0 into match-all-present mode.
        returns self so it can be chained """
        if self.column < 0:
            raise RuntimeError("Value column must be >= 0, got %d" % self.column)
        if self.headerLines < 0:
            raise RuntimeError("Header line count must be >= 0, got %d" % self.headerLines)
        if self.graceDistance < 0:
            raise RuntimeError("Grace distance must be >= 0, got %d" % self.graceDistance)
        if self.minWidth < 1:
            raise RuntimeError("Minimum width must be >= 1, got %d" % self.minWidth)
        for text in (self.headerName, self.headerDescription):
            # both end up inside double quotes in the track line
            if text is not None and '"' in text:
                raise RuntimeError("Track line text cannot contain a double quote: %s" % text)
        if self.column == 0:
            if self.strict or self.criterion != 1:
                logger.warning("Column 0 matches every present position: ignoring criterion=%s strict=%s" % (
                    self.criterion, self.strict))
            self.matchAllPresent = True
            self.criterion = 1
            self.strict = False
        else:
            self.matchAllPresent = False
        return self

    def requiredFields(self):
        """ number of fields a data line needs """
        if self.matchAllPresent:
            return 2
        return max(2, self.column)

    def __repr__(self):
        return "IntervalOptions(%s)" % ", ".join("%s=%r" % (k, v) for k, v in sorted(self.__dict__.items()))

class ConfigWrapper:
    defaultColumn = 3
    defaultCriterion = 1
    defaultStrict = False
    defaultInputSeparator = 'tab'
    defaultOutputSeparator = 'tab'
    defaultHeaderLines = 1
    defaultSkipComments = True
    defaultGraceDistance = 0
    defaultMinWidth = 1
    defaultEmitHeader = True
    defaultOffset = -1

    def __init__(self, xmlRoot):
        self.xmlRoot = xmlRoot

    @staticmethod
    def defaultConfigPath():
        return os.path.join(sigbedRootPath(), "sigbed_config.xml")

    @classmethod
    def fromFile(cls, path=None):
        if path is None:
            path = cls.defaultConfigPath()
        if not os.path.isfile(path):
            raise RuntimeError("Config file not found: %s" % path)
        return cls(ET.parse(path).getroot())

    def getIntervalsElem(self):
        return findRequiredNode(self.xmlRoot, "intervals")

    def getMaskElem(self):
        return self.xmlRoot.find("mask")

    def getColumn(self):
        return getOptionalAttrib(self.getIntervalsElem(), "column", typeFn=int, default=self.defaultColumn)

    def getCriterion(self):
        return getOptionalAttrib(self.getIntervalsElem(), "criterion", typeFn=parseNumber,
                                 default=self.defaultCriterion)

    def getStrict(self):
        return getOptionalAttrib(self.getIntervalsElem(), "strict", typeFn=bool, default=self.defaultStrict)

    def getInputSeparator(self):
        return parseSeparator(getOptionalAttrib(self.getIntervalsElem(), "inputSeparator",
                                                default=self.defaultInputSeparator))

    def getOutputSeparator(self):
        sep = parseSeparator(getOptionalAttrib(self.getIntervalsElem(), "outputSeparator",
                                               default=self.defaultOutputSeparator))
        if sep is None:
            raise RuntimeError("outputSeparator must be an actual separator, not whitespace")
        return sep

    def getHeaderLines(self):
        return getOptionalAttrib(self.getIntervalsElem(), "headerLines", typeFn=int,
                                 default=self.defaultHeaderLines)

    def getSkipComments(self):
        return getOptionalAttrib(self.getIntervalsElem(), "skipComments", typeFn=bool,
                                 default=self.defaultSkipComments)

    def getGraceDistance(self):
        return getOptionalAttrib(self.getIntervalsElem(), "graceDistance", typeFn=int,
                                 default=self.defaultGraceDistance)

    def getMinWidth(self):
        return getOptionalAttrib(self.getIntervalsElem(), "minWidth", typeFn=int,
                                 default=self.defaultMinWidth)

    def getEmitHeader(self):
        return getOptionalAttrib(self.getIntervalsElem(), "emitHeader", typeFn=bool,
                                 default=self.defaultEmitHeader)

    def getHeaderName(self):
        return getOptionalAttrib(self.getIntervalsElem(), "headerName")

    def getHeaderDescription(self):
        return getOptionalAttrib(self.getIntervalsElem(), "headerDescription")

    def getOffset(self):
        return getOptionalAttrib(self.getIntervalsElem(), "offset", typeFn=int, default=self.defaultOffset)

    def getMaskChar(self):
        maskChar = getOptionalAttrib(self.getMaskElem(), "maskChar")
        if maskChar is not None and len(maskChar) != 1:
            raise RuntimeError("maskChar must be a single character, got \"%s\"" % maskChar)
        return maskChar

    def getPreserveCase(self):
        return getOptionalAttrib(self.getMaskElem(), "preserveCase", typeFn=bool, default=False)

    def getIntervalOptions(self, overrides=None):
        """ build IntervalOptions from the xml, letting any non-None attribute of
        overrides (typically the parsed command line) win """
        options = IntervalOptions()
        options.column = self.getColumn()
        options.criterion = self.getCriterion()
        options.strict = self.getStrict()
        options.inputSeparator = self.getInputSeparator()
        options.outputSeparator = self.getOutputSeparator()
        options.headerLines = self.getHeaderLines()
        options.skipComments = self.getSkipComments()
        options.graceDistance = self.getGraceDistance()
        options.minWidth = self.getMinWidth()
        options.emitHeader = self.getEmitHeader()
        options.headerName = self.getHeaderName()
        options.headerDescription = self.getHeaderDescription()
        options.offset = self.getOffset()

        if overrides is not None:
            for name in list(options.__dict__.keys()):
                if name == 'matchAllPresent':
                    continue
                value = getattr(overrides, name, None)
                if value is None:
                    continue
                if name in ('inputSeparator', 'outputSeparator'):
                    value = parseSeparator(value)
                    if name == 'outputSeparator' and value is None:
                        raise RuntimeError("outputSeparator must be an actual separator, not whitespace")
                setattr(options, name, value)

        return options.resolve()
