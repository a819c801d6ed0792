import enum


class DeploymentEnvironment(enum.Enum):
    Production = "production"
    Development = "development"
    Test = "test"
    Local = "local"


class AssignmentType(enum.Enum):
    Solo = "solo"
    Group = "group"
    Peer = "peer"

    @property
    def show(self) -> str:
        match self:
            case AssignmentType.Solo:
                return "Solo Assignment"
            case AssignmentType.Group:
                return "Group Assignment"
            case AssignmentType.Peer:
                return "Peer Evaluation"


class OpenPanel(enum.Enum):
    Student = "Students"
    Group = "Groups"
    Assignment = "Assignments"
