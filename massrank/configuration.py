
import os


class Configuration:

    def __init__(self):

        self.config = {}

        # defaults of the pagerank entry point

        self.config['pagerank.teleport'] = 0.15
        self.config['pagerank.max.iterations'] = 100
        self.config['pagerank.convergence'] = None

        # machine epsilon used by every normalization check
        self.config['pagerank.eps'] = 1.0e-15

        # message aggregation over edge partitions

        self.config['parallel.jobs'] = 1
        self.config['parallel.partitions'] = None
        self.config['parallel.backend'] = 'threading'

        self.config['progress'] = False
        self.config['rc'] = None


    def __getitem__(self, index):
        return self.config[index]
    

    def __contains__(self, index):
        return index in self.config
    

    def update(self, conf):
        for key in conf:
            if key in self.config:
                self.config[key] = conf[key]
    

    def update_config(self, conf_name, value):
        self.config[conf_name] = value


    def load(self, fname):
        import json
        with open(fname, 'r') as f:
            self.update(json.load(f))
        self.config['rc'] = os.path.abspath(fname)


default = Configuration()
