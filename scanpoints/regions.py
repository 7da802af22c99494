"""
Bounding shape inference and position filtering from regions of interest.
"""
import dataclasses
import re

from .errors import InvalidModel
from .interfaces import IROI, IPointContainer, IBoundingBoxModel, IBoundingLineModel
from .models import BoundingLine
from .rois import LinearROI, PredicateContainer
from .utils.log import get_module_logger

logger = get_module_logger(__name__)


def set_bounds(model, regions):
    """
    Derive the bounding shape of a model from regions of interest.

    For models with a bounding box, the box becomes the union of the bounds of all regions and of
    the existing box of the model if one is set. For models with a bounding line, the first linear
    region is used as the line. Other models are returned unchanged. Items which are not regions
    of interest are ignored.

    :param model: scan model
    :param regions: sequence of regions of interest
    :return: model with updated bounding shape, a new object if anything changed
    """
    rois = [region for region in regions if IROI.providedBy(region)]
    if not rois:
        return model

    if IBoundingBoxModel.providedBy(model):
        rect = rois[0].bounds()
        for roi in rois[1:]:
            rect = rect.union(roi.bounds())
        if model.bounding_box is not None:
            rect = rect.union(model.bounding_box)
        return dataclasses.replace(model, bounding_box=rect)

    elif IBoundingLineModel.providedBy(model):
        linear = [roi for roi in rois if isinstance(roi, LinearROI)]
        if not linear:
            raise InvalidModel('A linear region is required to bound the line', model_id=model.kind)
        roi = linear[0]
        line = BoundingLine(float(roi.start[0]), float(roi.start[1]), roi.length, roi.angle)
        return dataclasses.replace(model, bounding_line=line)

    return model


def wrap(regions):
    """
    Convert regions of interest, containers and predicates into a list of containers.

    :param regions: sequence of regions of interest, point containers or callables
    :return: list of IPointContainer providers
    """
    containers = []
    for region in regions or []:
        container = IPointContainer(region, None)
        if container is None and callable(region):
            container = PredicateContainer(region)
        if container is None:
            logger.warning('Ignoring region of unsupported type {}'.format(type(region).__name__))
            continue
        containers.append(container)
    return containers


def _match_entries(scannables, names):
    return all(
        any(re.fullmatch('/entry/.+/{}_value_set'.format(re.escape(name)), scannable) for scannable in scannables)
        for name in names
    )


def find_regions(model, scan_regions):
    """
    Select the regions of interest which apply to a model. A scan region applies if it names no
    scannables, if its scannables include every axis of the model, or if every axis of the model
    appears as a dataset path of the form /entry/<group>/<axis>_value_set.

    :param model: scan model
    :param scan_regions: sequence of ScanRegion
    :return: list of regions of interest
    """
    if not scan_regions:
        return []

    names = list(model.axes)

    def applies(scan_region):
        scannables = scan_region.scannables
        return (
            not scannables or
            set(scannables) >= set(names) or
            _match_entries(scannables, names)
        )

    return [scan_region.roi for scan_region in scan_regions if applies(scan_region)]
