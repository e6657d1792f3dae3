from .RiffWave import AudioFormat, Channels, RiffWave, WaveFormat

__all__ = ['AudioFormat', 'Channels', 'RiffWave', 'WaveFormat']
