"""Recording sessions: sink setup, player metadata, the recording worker and its status."""