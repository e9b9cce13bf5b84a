# Models package
from imagemgmt.models.enums import ImageVersionState, SelectionStrategy, StabilityTag
from imagemgmt.models.image_type import ImageType
from imagemgmt.models.image_version import ImageVersion
from imagemgmt.models.rampup import ImageRampup, ImageRampupPlan
