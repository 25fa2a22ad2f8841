#!/usr/bin/env python3
#Copyright (C) 2009-2011 by Benedict Paten (benedictpaten@gmail.com)
#
#Released under the MIT license, see LICENSE.txt
"""Helper functions shared by the sigbed scripts and jobs.
"""

import os
import gzip

from urllib.parse import urlparse

from toil.job import Job


class MalformedRecordError(ValueError):
    """A data line could not be turned into a record."""
    def __init__(self, message, lineNumber=None, line=None):
        if lineNumber is not None:
            message = "%s (line %d): %s" % (message, lineNumber, line)
        super(MalformedRecordError, self).__init__(message)
        self.lineNumber = lineNumber
        self.line = line

class UnsortedRecordError(MalformedRecordError):
    """Records are not grouped by reference or positions are not increasing."""
    pass

class InvalidIntervalError(ValueError):
    pass

# names accepted wherever a field separator is configured.  None means
# split on runs of whitespace
separatorNames = { 'tab' : '\t',
                   'space' : ' ',
                   'comma' : ',',
                   'whitespace' : None }

def parseSeparator(separator):
    """Turn a separator name (or a literal separator) into the string to split on.

    >>> parseSeparator('tab')
    '\\t'
    >>> parseSeparator(';')
    ';'
    >>> parseSeparator('whitespace') is None
    True
    """
    if separator is None:
        return None
    if separator.lower() in separatorNames:
        return separatorNames[separator.lower()]
    if separator == '':
        raise RuntimeError("Empty field separator")
    return separator

def parseNumber(token):
    """ int if it looks like one, otherwise float.  ValueError otherwise """
    try:
        return int(token)
    except ValueError:
        return float(token)

def sigbedRootPath():
    """
    function for finding the installed package location
    """
    import sigbed
    i = os.path.abspath(sigbed.__file__)
    return os.path.split(i)[0]

def makeURL(path_or_url):
    if urlparse(path_or_url).scheme == '':
        return "file://" + os.path.abspath(path_or_url)
    else:
        return path_or_url

def openInput(path, mode='rt'):
    """ open a text file, going through gzip if it has a .gz extension """
    if path.endswith('.gz'):
        return gzip.open(path, mode)
    return open(path, mode)

def getOptionalAttrib(node, attribName, typeFn=None, default=None, errorIfNotPresent=False):
    """Get an optional attrib, or default if not set or node is None
    """
    if node is not None and attribName in node.attrib:
        if typeFn is not None:
            if typeFn == bool:
                aname = node.attrib[attribName].lower()
                if aname == 'false':
                    return False
                elif aname == 'true':
                    return True
                else:
                    return bool(int(node.attrib[attribName]))
            return typeFn(node.attrib[attribName])
        return node.attrib[attribName]
    if errorIfNotPresent:
        raise RuntimeError("Could not find attribute %s in %s node" % (attribName, node))
    return default

def findRequiredNode(configNode, nodeName):
    """Retrieve an xml node, complain if it's not there."""
    nodes = configNode.findall(nodeName)
    if not nodes:
        raise RuntimeError("Could not find any nodes with name %s in %s node" % (nodeName, configNode))
    assert len(nodes) == 1, "More than 1 node for %s in config XML" % nodeName
    return nodes[0]

class RoundedJob(Job):
    """Thin wrapper around Toil.Job to round up resource requirements.

    Rounding is useful to make Toil's Mesos scheduler more
    efficient--it runs a process that is O(n log n) in the number of
    different resource requirements for every offer received, so
    thousands of slightly different requirements will slow down the
    leader and the workflow.
    """
    # Default rounding amount: 100 MiB
    roundingAmount = 100*1024*1024
    def __init__(self, memory=None, cores=None, disk=None, preemptible=None,
                 unitName='', checkpoint=False):
        if memory is not None:
            memory = self.roundUp(memory)
        if disk is not None:
            disk = self.roundUp(disk)
        super(RoundedJob, self).__init__(memory=memory, cores=cores, disk=disk,
                                         preemptible=preemptible, unitName=unitName,
                                         checkpoint=checkpoint)

    def roundUp(self, bytesRequirement):
        """
        Round the amount up to the next self.roundingAmount.
        """
        if bytesRequirement % self.roundingAmount == 0:
            return bytesRequirement
        return (bytesRequirement // self.roundingAmount + 1) * self.roundingAmount
