from .episode import Episode, run_episode
from .training import TrainingStats, train
